from .simplex import LinearProgram, build_linear_program, effective_bounds, solve_lp, solve_relaxation

__all__ = [
    "LinearProgram",
    "build_linear_program",
    "effective_bounds",
    "solve_lp",
    "solve_relaxation",
]
