"""Text-format reader for linear and mixed-integer programs."""

from .bounds import BoundsBuilder
from .constraint import parse_constraint
from .expression import parse_expression, parse_term, scan_terms
from .model_file import parse_file, parse_lines, parse_text
from .text import is_blank, split, trim

__all__ = [
    "BoundsBuilder",
    "parse_constraint",
    "parse_expression",
    "parse_term",
    "scan_terms",
    "parse_file",
    "parse_lines",
    "parse_text",
    "is_blank",
    "split",
    "trim",
]
