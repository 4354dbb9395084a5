from .lp.simplex import solve_lp
from .mip.branch_and_cut import solve_mip

__all__ = ["solve_lp", "solve_mip"]
