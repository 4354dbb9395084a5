from __future__ import annotations

from typing import Tuple

from ..errors import InvalidConstraintFormat, InvalidNumber, NoTermsFound
from ..schemas import LinearExpression
from .expression import parse_expression
from .text import trim


def split_comparison(text: str) -> Tuple[str, str, str] | None:
    """Split ``lhs <op> rhs`` at the last operator in the line.

    The left side takes everything up to the rightmost ``=``; a ``<`` or
    ``>`` directly before it belongs to the operator.
    """
    idx = text.rfind("=")
    if idx < 0:
        return None
    if idx > 0 and text[idx - 1] in "<>":
        op = text[idx - 1 : idx + 1]
        lhs = text[: idx - 1]
    else:
        op = "="
        lhs = text[:idx]
    return lhs, op, text[idx + 1 :]


def parse_number(text: str, line: int) -> float:
    cleaned = trim(text)
    if "_" in cleaned:
        raise InvalidNumber(line, cleaned)
    try:
        return float(cleaned)
    except ValueError as exc:
        raise InvalidNumber(line, cleaned) from exc


def parse_constraint(text: str, line: int) -> LinearExpression:
    parts = split_comparison(text)
    if parts is None:
        raise InvalidConstraintFormat(line, "no comparison operator")
    lhs, op, rhs_text = parts
    if not lhs or not rhs_text:
        raise InvalidConstraintFormat(line, "missing left or right side")

    try:
        terms = parse_expression(lhs, line)
    except NoTermsFound as exc:
        raise InvalidConstraintFormat(line, "left side has no terms") from exc
    rhs = parse_number(rhs_text, line)
    return LinearExpression(terms=terms, rhs=rhs, op=op, line=line)
