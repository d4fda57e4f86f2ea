"""
Command-line front end: collect the session parameters, run the packing
loop and write the resulting circles as a JSON document.
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import PackingAlgorithm, PackingConfig
from .driver import PackingResult, run_packing

# Smallest radius accepted on the command line
MIN_RADIUS = 0.001


def build_parser() -> argparse.ArgumentParser:
    defaults = PackingConfig()
    parser = argparse.ArgumentParser(
        prog="diskrelax",
        description="Relax randomly sized circles into a tight, non-overlapping cluster.",
    )
    parser.add_argument("--count", type=int, default=defaults.count, help="number of circles (at least 2).")
    parser.add_argument("--min-radius", type=float, default=defaults.min_radius, help="smallest circle radius.")
    parser.add_argument("--max-radius", type=float, default=defaults.max_radius, help="largest circle radius.")
    parser.add_argument(
        "--iterations", type=int, default=defaults.iteration_limit, help="maximum number of packing passes."
    )
    parser.add_argument(
        "--algorithm",
        choices=[a.value for a in PackingAlgorithm],
        default=defaults.algorithm.value,
        help="collision-resolution strategy (see --describe).",
    )
    parser.add_argument(
        "--center",
        type=float,
        nargs="+",
        default=[0.0, 0.0],
        metavar="COORD",
        help="center of the packing as X Y [Z].",
    )
    parser.add_argument("--tolerance", type=float, default=defaults.tolerance, help="scene precision.")
    parser.add_argument("--damping", type=float, default=defaults.damping, help="initial contraction factor.")
    parser.add_argument(
        "--decay", type=float, default=defaults.damping_decay, help="damping multiplier applied after every pass."
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible runs.")
    parser.add_argument("--output", type=str, default=None, help="JSON file to write (stdout when omitted).")
    parser.add_argument("--verbose", action="store_true", help="print progress while packing.")
    parser.add_argument("--describe", action="store_true", help="describe the packing algorithms and exit.")
    return parser


def describe_algorithms() -> str:
    return "\n\n".join(a.description for a in PackingAlgorithm)


def result_document(args: argparse.Namespace, result: PackingResult) -> dict:
    return {
        "center": list(args.center),
        "algorithm": args.algorithm,
        "status": result.status.value,
        "iterations": result.iterations,
        "circles": [{"x": x, "y": y, "radius": r} for x, y, r in result.circles],
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.describe:
        print(describe_algorithms())
        return 0

    if len(args.center) not in (2, 3):
        parser.error("--center expects 2 or 3 coordinates")
    if args.min_radius < MIN_RADIUS or args.max_radius < MIN_RADIUS:
        parser.error(f"--min-radius and --max-radius must be at least {MIN_RADIUS}")

    config = PackingConfig(
        count=args.count,
        min_radius=args.min_radius,
        max_radius=args.max_radius,
        algorithm=PackingAlgorithm.parse(args.algorithm),
        iteration_limit=args.iterations,
        damping=args.damping,
        damping_decay=args.decay,
        tolerance=args.tolerance,
        seed=args.seed,
        verbose=args.verbose,
    )

    try:
        # Progress goes to stderr when stdout carries the JSON document
        stream = sys.stdout if args.output else sys.stderr
        result = run_packing(args.center, config, stream=stream)
    except ValueError as e:
        parser.error(str(e))

    text = json.dumps(result_document(args, result), indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        if args.verbose:
            print(f"Wrote {len(result.circles)} circles to {args.output}")
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
