from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog

from ...schemas import BoundFact, LPModel, LPSolution, SolveOptions

logger = logging.getLogger(__name__)

Bound = Tuple[Optional[float], Optional[float]]


class LinearProgram(NamedTuple):
    """Matrix form of an LPModel, laid out for ``scipy.optimize.linprog``."""

    names: List[str]
    c: np.ndarray
    A_ub: np.ndarray
    b_ub: np.ndarray
    A_eq: np.ndarray
    b_eq: np.ndarray
    bounds: List[Bound]
    integer_mask: List[bool]
    ub_rows: List[Tuple[str, float]]
    eq_rows: List[str]
    sense_factor: float


def build_linear_program(model: LPModel) -> LinearProgram:
    if model.sense is None:
        raise ValueError("Model has no optimization sense; add a 'Max' or 'Min' line")
    names = model.variable_names()
    index = {name: idx for idx, name in enumerate(names)}
    c = _build_objective(model, index)
    A_ub, b_ub, A_eq, b_eq, ub_rows, eq_rows = _build_constraint_matrices(model, index)
    bounds = [effective_bounds(name, model.bounds.get(name)) for name in names]
    integer_mask = [
        name in model.bounds and model.bounds[name].kind != "continuous" for name in names
    ]
    return LinearProgram(
        names=names,
        c=c,
        A_ub=A_ub,
        b_ub=b_ub,
        A_eq=A_eq,
        b_eq=b_eq,
        bounds=bounds,
        integer_mask=integer_mask,
        ub_rows=ub_rows,
        eq_rows=eq_rows,
        sense_factor=1.0 if model.sense == "min" else -1.0,
    )


def effective_bounds(name: str, fact: Optional[BoundFact]) -> Bound:
    """Resolve a variable's declared facts into a ``(lb, ub)`` pair.

    Undeclared variables follow the usual LP convention of ``x >= 0``; a
    ``free`` declaration wins over any numeric bound.
    """
    if fact is None:
        return (0.0, None)
    if fact.is_free:
        return (None, None)
    lb = None if np.isneginf(fact.lower) else fact.lower
    ub = None if np.isposinf(fact.upper) else fact.upper
    if lb is not None and ub is not None and lb > ub:
        raise ValueError(f"Variable {name} has inconsistent bounds {lb}>{ub}")
    return (lb, ub)


def solve_lp(model: LPModel, options: Optional[SolveOptions] = None) -> LPSolution:
    opts = options or SolveOptions()
    program = build_linear_program(model)
    logger.info(
        f"Solving LP with {len(program.names)} variables and "
        f"{len(program.ub_rows) + len(program.eq_rows)} constraints"
    )
    return solve_relaxation(program, opts)


def solve_relaxation(
    program: LinearProgram,
    options: SolveOptions,
    bounds: Optional[Sequence[Bound]] = None,
) -> LPSolution:
    """Solve the continuous relaxation, optionally with tightened bounds."""
    res = linprog(
        program.c * program.sense_factor,
        A_ub=program.A_ub if program.A_ub.size else None,
        b_ub=program.b_ub if program.b_ub.size else None,
        A_eq=program.A_eq if program.A_eq.size else None,
        b_eq=program.b_eq if program.b_eq.size else None,
        bounds=list(bounds if bounds is not None else program.bounds),
        method=options.method,
        options={"maxiter": options.max_iters},
    )
    iterations = int(getattr(res, "nit", 0) or 0)

    if not res.success:
        return LPSolution(
            status=_map_status(res.status),
            objective_value=None,
            x=None,
            duals=None,
            iterations=iterations,
            message=res.message,
        )

    values = {name: float(value) for name, value in zip(program.names, res.x)}
    objective = float(res.fun * program.sense_factor)
    duals = _extract_duals(program, res) if options.return_duals else None

    return LPSolution(
        status="optimal",
        objective_value=objective,
        x=values,
        duals=duals,
        iterations=iterations,
        message=res.message or "",
    )


def _build_objective(model: LPModel, index: Dict[str, int]) -> np.ndarray:
    c = np.zeros(len(index))
    for term in model.objective.terms:
        c[index[term.variable]] += term.coefficient
    return c


def _build_constraint_matrices(
    model: LPModel, index: Dict[str, int]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, List[Tuple[str, float]], List[str]]:
    n = len(index)
    A_ub: List[List[float]] = []
    b_ub: List[float] = []
    A_eq: List[List[float]] = []
    b_eq: List[float] = []
    ub_rows: List[Tuple[str, float]] = []
    eq_rows: List[str] = []

    for pos, cons in enumerate(model.constraints, start=1):
        name = f"c{pos}"
        row = [0.0] * n
        for term in cons.terms:
            row[index[term.variable]] += term.coefficient

        if cons.op == "<=":
            A_ub.append(row)
            b_ub.append(cons.rhs)
            ub_rows.append((name, 1.0))
        elif cons.op == ">=":
            A_ub.append([-value for value in row])
            b_ub.append(-cons.rhs)
            ub_rows.append((name, -1.0))
        elif cons.op == "=":
            A_eq.append(row)
            b_eq.append(cons.rhs)
            eq_rows.append(name)
        else:
            raise ValueError(f"Unknown constraint operator '{cons.op}' on line {cons.line}")

    return (
        np.array(A_ub, dtype=float) if A_ub else np.empty((0, n)),
        np.array(b_ub, dtype=float) if b_ub else np.empty(0),
        np.array(A_eq, dtype=float) if A_eq else np.empty((0, n)),
        np.array(b_eq, dtype=float) if b_eq else np.empty(0),
        ub_rows,
        eq_rows,
    )


def _extract_duals(program: LinearProgram, res) -> Dict[str, float]:
    duals: Dict[str, float] = {}
    ineqlin = getattr(res, "ineqlin", None)
    if ineqlin is not None and "marginals" in ineqlin:
        for (name, row_sign), value in zip(program.ub_rows, ineqlin["marginals"]):
            duals[name] = float(value * program.sense_factor * row_sign)
    eqlin = getattr(res, "eqlin", None)
    if eqlin is not None and "marginals" in eqlin:
        for name, value in zip(program.eq_rows, eqlin["marginals"]):
            duals[name] = float(value * program.sense_factor)
    return duals


def _map_status(code: int) -> str:
    mapping = {
        0: "optimal",
        1: "iteration_limit",
        2: "infeasible",
        3: "unbounded",
    }
    return mapping.get(code, "iteration_limit")
