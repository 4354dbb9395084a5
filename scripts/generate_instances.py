#!/usr/bin/env python3
import argparse
import random
from pathlib import Path
from typing import List, Optional


def generate_random_model(
    num_vars: int,
    num_constraints: int,
    seed: Optional[int] = None,
    num_integer: int = 0,
) -> str:
    """Return model-file text for a random feasible, bounded maximisation problem."""
    rng = random.Random(seed)
    names = [f"x{i}" for i in range(num_vars)]

    def expression(low: float, high: float) -> str:
        parts: List[str] = []
        for name in names:
            coef = round(rng.uniform(low, high), 2)
            parts.append(f"{coef}{name}" if not parts else f"+ {coef}{name}")
        return " ".join(parts)

    lines = ["// generated", "Max", expression(1.0, 4.0)]
    for _ in range(num_constraints):
        rhs = round(rng.uniform(num_vars * 2.0, num_vars * 6.0), 2)
        lines.append(f"{expression(0.5, 5.0)} <= {rhs}")

    lines.append("Bounds:")
    for name in names:
        lines.append(f"{name} >= 0")
    if num_integer:
        lines.append("Integer:")
        lines.append(", ".join(names[: min(num_integer, num_vars)]))
    return "\n".join(lines) + "\n"


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible model files.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--integer", type=int, default=0, help="How many variables are integer")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output directory")
    args = parser.parse_args()

    for idx in range(args.count):
        text = generate_random_model(args.vars, args.constraints, (args.seed or 0) + idx, args.integer)
        if args.out:
            args.out.mkdir(parents=True, exist_ok=True)
            (args.out / f"random_{idx}.lp").write_text(text)
        else:
            print(text)


if __name__ == "__main__":
    main()
