"""Errors raised while reading a model file.

Every parse error carries the 1-based line number it was raised for and
renders as ``"Line N: <description>"``. The first error aborts the parse.
"""

from __future__ import annotations


class ModelFileError(ValueError):
    """Base class for everything that can go wrong turning a file into an LPModel."""


class FileUnavailable(ModelFileError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Could not open input file: {path}")


class ParseError(ModelFileError):
    description = "Parse error"

    def __init__(self, line: int, detail: str | None = None) -> None:
        self.line = line
        self.detail = detail
        message = f"Line {line}: {self.description}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidTermFormat(ParseError):
    description = "Invalid term format"

    def __init__(self, line: int, token: str) -> None:
        self.token = token
        super().__init__(line, f"'{token}'")


class NoTermsFound(ParseError):
    description = "No valid terms found in expression"


class InvalidConstraintFormat(ParseError):
    description = "Invalid constraint format"


class InvalidNumber(ParseError):
    description = "Invalid number"

    def __init__(self, line: int, text: str) -> None:
        self.text = text
        super().__init__(line, f"'{text}'")


class DuplicateObjectiveSense(ParseError):
    description = "Duplicate optimization type"


class InvalidBoundFormat(ParseError):
    description = "Invalid bound format"


class MisplacedLine(ParseError):
    description = "Unexpected line or misplaced section"
