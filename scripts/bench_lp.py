#!/usr/bin/env python3
import time
from pathlib import Path

from milp_optimizer.parser import parse_file, parse_text
from milp_optimizer.schemas import SolveOptions
from milp_optimizer.solvers.mip.branch_and_cut import solve_mip
from scripts.generate_instances import generate_random_model


def main() -> None:
    opts = SolveOptions(return_duals=False)
    examples = Path(__file__).resolve().parent.parent / "examples"
    cases = [(f"examples/{path.name}", parse_file(path)) for path in sorted(examples.glob("*.lp"))]
    for seed in range(3):
        cases.append((f"random-{seed}", parse_text(generate_random_model(4, 3, seed, num_integer=2))))

    print("name,status,objective,iterations,nodes,time_ms")
    for name, model in cases:
        start = time.perf_counter()
        solution = solve_mip(model, opts)
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(
            f"{name},{solution.status},{solution.objective_value},"
            f"{solution.iterations},{solution.nodes},{elapsed_ms:.2f}"
        )


if __name__ == "__main__":
    main()
