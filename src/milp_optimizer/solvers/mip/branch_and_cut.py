from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

from ...schemas import LPModel, MIPSolution, SolveOptions
from ..lp.simplex import Bound, LinearProgram, build_linear_program, effective_bounds, solve_relaxation

logger = logging.getLogger(__name__)


def solve_mip(
    model: LPModel,
    options: Optional[SolveOptions] = None,
    use_or_tools: bool = False,
) -> MIPSolution:
    opts = options or SolveOptions(return_duals=False)

    if use_or_tools:
        try:
            return _solve_with_ortools(model)
        except (ImportError, RuntimeError) as exc:  # pragma: no cover - optional path
            logger.error(f"OR-Tools solve failed: {exc}")
            return MIPSolution(
                status="iteration_limit",
                objective_value=None,
                x=None,
                iterations=0,
                message=f"OR-Tools fallback failed: {exc}",
            )

    program = build_linear_program(model)

    if not any(program.integer_mask):
        lp_solution = solve_relaxation(program, opts)
        return MIPSolution(
            status=lp_solution.status,
            objective_value=lp_solution.objective_value,
            x=lp_solution.x,
            iterations=lp_solution.iterations,
            nodes=1,
            message=lp_solution.message,
        )

    incumbent: Optional[MIPSolution] = None
    stack: List[Tuple[List[Bound], int]] = [(list(program.bounds), 0)]
    explored = 0
    iterations = 0
    max_nodes = opts.max_nodes or max(128, len(program.names) * 32)
    # Branch-and-bound compares objectives in "larger is better" terms.
    direction = -program.sense_factor

    while stack and explored < max_nodes:
        bounds, depth = stack.pop()
        lp_solution = solve_relaxation(program, opts, bounds)
        explored += 1
        iterations += lp_solution.iterations

        if lp_solution.status in {"infeasible", "iteration_limit"}:
            continue
        if lp_solution.status == "unbounded":
            return MIPSolution(
                status="unbounded",
                objective_value=None,
                x=None,
                iterations=iterations,
                nodes=explored,
                message="LP relaxation unbounded",
            )
        if lp_solution.objective_value is None or lp_solution.x is None:
            continue

        if incumbent and direction * lp_solution.objective_value <= direction * incumbent.objective_value + opts.tol:
            continue

        fractional = _find_fractional(program, lp_solution.x, opts.tol)
        if fractional is None:
            logger.debug(f"Node {explored} (depth {depth}): new incumbent {lp_solution.objective_value}")
            incumbent = MIPSolution(
                status="optimal",
                objective_value=lp_solution.objective_value,
                x=_round_integers(program, lp_solution.x),
                iterations=iterations,
                nodes=explored,
                message="Feasible integer solution",
            )
            continue

        idx, value = fractional
        lower_branch = _tighten_bound(bounds, idx, "ub", math.floor(value))
        upper_branch = _tighten_bound(bounds, idx, "lb", math.ceil(value))

        if upper_branch is not None:
            stack.append((upper_branch, depth + 1))
        if lower_branch is not None:
            stack.append((lower_branch, depth + 1))

    logger.info(f"Branch-and-bound explored {explored} nodes")
    if incumbent:
        return incumbent.model_copy(update={"iterations": iterations, "nodes": explored})

    return MIPSolution(
        status="iteration_limit" if explored >= max_nodes else "infeasible",
        objective_value=None,
        x=None,
        iterations=iterations,
        nodes=explored,
        message="Search exhausted without finding feasible solution",
    )


def _find_fractional(program: LinearProgram, values: Dict[str, float], tol: float) -> Optional[Tuple[int, float]]:
    best_idx: Optional[int] = None
    best_gap = 0.0
    best_value = 0.0
    for idx, name in enumerate(program.names):
        if not program.integer_mask[idx]:
            continue
        value = values[name]
        gap = abs(value - round(value))
        if gap > max(tol, 1e-6) and gap > best_gap:
            best_gap = gap
            best_idx = idx
            best_value = value
    if best_idx is None:
        return None
    return best_idx, best_value


def _tighten_bound(bounds: List[Bound], idx: int, side: str, value: float) -> Optional[List[Bound]]:
    lb, ub = bounds[idx]
    if side == "ub":
        if ub is not None and ub <= value:
            return None
        ub = float(value)
    else:
        if lb is not None and lb >= value:
            return None
        lb = float(value)
    if lb is not None and ub is not None and lb > ub:
        return None
    new_bounds = list(bounds)
    new_bounds[idx] = (lb, ub)
    return new_bounds


def _round_integers(program: LinearProgram, values: Dict[str, float]) -> Dict[str, float]:
    return {
        name: float(round(values[name])) if program.integer_mask[idx] else values[name]
        for idx, name in enumerate(program.names)
    }


def _solve_with_ortools(model: LPModel) -> MIPSolution:
    from ortools.linear_solver import pywraplp  # type: ignore

    if model.sense is None:
        raise ValueError("Model has no optimization sense; add a 'Max' or 'Min' line")

    solver = pywraplp.Solver.CreateSolver("CBC")
    if solver is None:
        raise RuntimeError("Unable to initialise OR-Tools CBC solver")

    variables: Dict[str, object] = {}
    for name in model.variable_names():
        fact = model.bounds.get(name)
        lb, ub = effective_bounds(name, fact)
        lb = lb if lb is not None else -solver.infinity()
        ub = ub if ub is not None else solver.infinity()
        if fact is not None and fact.kind != "continuous":
            var_obj = solver.IntVar(lb, ub, name)
        else:
            var_obj = solver.NumVar(lb, ub, name)
        variables[name] = var_obj

    for cons in model.constraints:
        expr = solver.Sum(term.coefficient * variables[term.variable] for term in cons.terms)
        if cons.op == "<=":
            solver.Add(expr <= cons.rhs)
        elif cons.op == ">=":
            solver.Add(expr >= cons.rhs)
        else:
            solver.Add(expr == cons.rhs)

    objective_expr = solver.Sum(term.coefficient * variables[term.variable] for term in model.objective.terms)
    if model.sense == "max":
        solver.Maximize(objective_expr)
    else:
        solver.Minimize(objective_expr)

    status = solver.Solve()
    status_map = {
        pywraplp.Solver.OPTIMAL: "optimal",
        pywraplp.Solver.FEASIBLE: "optimal",
        pywraplp.Solver.INFEASIBLE: "infeasible",
        pywraplp.Solver.UNBOUNDED: "unbounded",
        pywraplp.Solver.ABNORMAL: "iteration_limit",
        pywraplp.Solver.NOT_SOLVED: "iteration_limit",
    }
    mapped = status_map.get(status, "iteration_limit")

    if mapped != "optimal":
        return MIPSolution(
            status=mapped,
            objective_value=None,
            x=None,
            iterations=0,
            message=f"OR-Tools returned status {mapped}",
        )

    values = {name: variables[name].solution_value() for name in variables}
    return MIPSolution(
        status="optimal",
        objective_value=solver.Objective().Value(),
        x=values,
        iterations=int(solver.iterations() if hasattr(solver, "iterations") else 0),
        nodes=int(solver.nodes() if hasattr(solver, "nodes") else 0),
        message="Solved via OR-Tools",
    )
