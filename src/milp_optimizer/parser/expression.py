"""Hand-written lexer for linear expressions such as ``3x + 2.5y - z``.

A term is ``[sign] [whitespace] [digits] [. digits] identifier``. The scanner
walks the text left to right; where no term starts at the current position
the character is skipped, so stray fragments (operators, constants, typos)
never become terms.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from ..errors import InvalidTermFormat, NoTermsFound
from ..schemas import Term


class _Match(NamedTuple):
    end: int
    coefficient: str
    variable: str


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or _is_digit(ch)


def _match_term(text: str, pos: int, allow_space: bool) -> Optional[_Match]:
    n = len(text)
    i = pos
    sign = ""
    if i < n and text[i] in "+-":
        sign = text[i]
        i += 1
    if allow_space:
        while i < n and text[i].isspace():
            i += 1

    number_start = i
    while i < n and _is_digit(text[i]):
        i += 1
    if i < n and text[i] == ".":
        i += 1
        while i < n and _is_digit(text[i]):
            i += 1
    number = text[number_start:i]

    if i >= n or not _is_identifier_start(text[i]):
        return None
    name_start = i
    i += 1
    while i < n and _is_identifier_char(text[i]):
        i += 1
    return _Match(end=i, coefficient=sign + number, variable=text[name_start:i])


def scan_terms(text: str) -> List[str]:
    """Return the term tokens found in ``text``, inner whitespace removed."""
    tokens: List[str] = []
    pos = 0
    while pos < len(text):
        match = _match_term(text, pos, allow_space=True)
        if match is None:
            pos += 1
            continue
        tokens.append(match.coefficient + match.variable)
        pos = match.end
    return tokens


def parse_term(token: str, line: int) -> Term:
    match = _match_term(token, 0, allow_space=False)
    if match is None or match.end != len(token):
        raise InvalidTermFormat(line, token)

    coef_text = match.coefficient
    if coef_text.lstrip("+-") == ".":
        raise InvalidTermFormat(line, token)
    if coef_text in ("", "+"):
        coef = 1.0
    elif coef_text == "-":
        coef = -1.0
    else:
        coef = float(coef_text)
    return Term(coefficient=coef, variable=match.variable)


def parse_expression(text: str, line: int) -> List[Term]:
    # Repeated variables are kept as separate terms.
    terms = [parse_term(token, line) for token in scan_terms(text)]
    if not terms:
        raise NoTermsFound(line)
    return terms
