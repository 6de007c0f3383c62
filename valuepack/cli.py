"""
Command-line entry point: solve a JSON request and write the JSON response.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from valuepack.core.result import PackingResult
from valuepack.core.solver_branch_bound import SolverSettings, solve
from valuepack.models.request import dump_response, load_request

logger = logging.getLogger("valuepack")


def format_layers(result: PackingResult) -> str:
    """Render the ``[z][x][y]`` grid one z layer at a time, '.' marking empty cells."""
    width = len(str(max(len(result.names) - 1, 0)))
    blocks: List[str] = []
    for z, layer in enumerate(result.grid):
        lines = [f"z = {z}"]
        for row in layer:
            lines.append(" ".join(("." if cell < 0 else str(cell)).rjust(width) for cell in row))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valuepack-solve",
        description="Select and place the most valuable set of boxes in a container.",
    )
    parser.add_argument("request", type=Path, help="JSON file with 'limit' and 'objects'")
    parser.add_argument("-o", "--output", type=Path, help="write the response JSON here")
    parser.add_argument("--pdf", type=Path, help="write a PDF report here")
    parser.add_argument("--verify", action="store_true", help="cross-check the optimum with CP-SAT")
    parser.add_argument("--layers", action="store_true", help="print the grid layer by layer")
    parser.add_argument("--max-cells", type=int, default=SolverSettings().max_cells)
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        items, container = load_request(args.request)
        result = solve(items, container, SolverSettings(max_cells=args.max_cells))
    except ValueError as exc:
        logger.error("Invalid request %s: %s", args.request, exc)
        return 2

    cpsat_status = None
    if args.verify:
        from valuepack.core.solver_cpsat import max_value_cpsat

        check = max_value_cpsat(items, container)
        cpsat_status = f"{check.status} (value {check.value})"
        if check.proven_optimal and check.value != result.best:
            logger.error("CP-SAT optimum %d differs from branch-and-bound optimum %d", check.value, result.best)
            return 1

    print("=== Value Packing Summary ===")
    print(f"Container: {container.size_x} x {container.size_y} x {container.size_z}")
    print(f"Objects Submitted: {len(items)} ({len(result.excluded)} too large)")
    print(f"Best Value: {result.best}")
    print(f"Selected: {', '.join(item.label for item in result.selected) or 'none'}")
    print(f"Volume Utilisation: {result.volume_utilisation_pct:.2f}%")
    if cpsat_status is not None:
        print(f"CP-SAT Cross-check: {cpsat_status}")
    if args.layers:
        print()
        print(format_layers(result))

    if args.output is not None:
        dump_response(result.to_dict(), args.output)
        print(f"Response saved to: {args.output}")
    if args.pdf is not None:
        from valuepack.report.pdf_generator import generate_pdf_report

        generate_pdf_report(args.pdf, container=container, items=items, result=result, cpsat_status=cpsat_status)
        print(f"Report saved to: {args.pdf}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
