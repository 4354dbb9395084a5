"""MILP Optimizer: model-file parser with SciPy/OR-Tools solver adapters."""

from .errors import ModelFileError, ParseError
from .parser import parse_file, parse_text
from .schemas import BoundFact, LinearExpression, LPModel, SolveOptions, Term
from .solvers import solve_lp, solve_mip

__all__ = [
    "ModelFileError",
    "ParseError",
    "parse_file",
    "parse_text",
    "BoundFact",
    "LinearExpression",
    "LPModel",
    "SolveOptions",
    "Term",
    "solve_lp",
    "solve_mip",
]
