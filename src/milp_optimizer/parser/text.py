from __future__ import annotations

from typing import List

_WHITESPACE = " \t\r\n"


def trim(text: str) -> str:
    return text.strip(_WHITESPACE)


def split(text: str, delimiter: str) -> List[str]:
    """Split on a single character and trim each piece.

    Empty pieces between adjacent delimiters are kept; a delimiter at the very
    end of the string does not produce a trailing empty piece.
    """
    if len(delimiter) != 1:
        raise ValueError("Delimiter must be a single character")
    if not text:
        return []
    pieces = text.split(delimiter)
    if pieces[-1] == "":
        pieces.pop()
    return [trim(piece) for piece in pieces]


def is_blank(text: str) -> bool:
    return not trim(text)
