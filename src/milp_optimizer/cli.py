"""Command-line front end: parse a model file, solve it, write a results log."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .parser import parse_file
from .schemas import LPModel, MIPSolution, SolveOptions
from .solvers.mip.branch_and_cut import solve_mip

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="milp-solve",
        description="Solve an LP/MILP model file and log the solution.",
    )
    parser.add_argument("-f", dest="input", type=Path, default=None, help="Path to the input model file")
    parser.add_argument("-o", dest="output", type=Path, default=None, help="Path to the output log file")
    parser.add_argument("--dual", action="store_true", help="Use the dual simplex method")
    parser.add_argument("--log", action="store_true", help="Verbose logging and a solver log section")
    parser.add_argument("--or-tools", action="store_true", help="Solve with OR-Tools CBC instead of the built-in search")
    return parser


def format_report(model: LPModel, solution: MIPSolution, include_log: bool = False) -> str:
    lines: List[str] = []
    if solution.objective_value is None:
        lines.append(f"Objective Value: none ({solution.status})")
    else:
        lines.append(f"Objective Value: {solution.objective_value:g}")
    lines.append("Variable Values:")
    if solution.x is not None:
        for name in model.variable_names():
            lines.append(f"  {name} = {solution.x.get(name, 0.0):g}")

    if include_log:
        lines.append("")
        lines.append("Solver Log:")
        lines.append(f"  status = {solution.status}")
        lines.append(f"  iterations = {solution.iterations}")
        lines.append(f"  nodes = {solution.nodes}")
        if solution.message:
            lines.append(f"  message = {solution.message}")
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    if args.input is None or args.output is None:
        print("Error: Input and output file paths are required.", file=sys.stderr)
        arg_parser.print_usage(sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.log else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = SolveOptions(method="highs-ds" if args.dual else "highs", return_duals=False)
    try:
        model = parse_file(args.input)
        solution = solve_mip(model, options, use_or_tools=args.or_tools)
        args.output.write_text(format_report(model, solution, include_log=args.log), encoding="utf-8")
    except (ValueError, OSError) as exc:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if solution.status != "optimal":
        logger.warning(f"Solver finished with status {solution.status}: {solution.message}")
    print(f"Solution logged to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
