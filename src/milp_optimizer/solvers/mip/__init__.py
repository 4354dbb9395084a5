"""Mixed-integer programming helpers."""

from .branch_and_cut import solve_mip

__all__ = ["solve_mip"]
