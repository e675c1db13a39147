"""Command line debugging aid for the transform matrices.

Examples:
    python main.py translate 1 2 3
    python main.py rotate --angle 90 --pivot 1 1 0
    python main.py invert 2 0 0 0  0 4 0 0  0 0 5 0  0 0 0 1
"""
import argparse
import logging
import sys
from math import pi
from typing import Optional

import settings
from elimination import EliminationError, EliminationSettings, gauss_jordan_elimination, PIVOT_STRATEGIES
from matrix import Matrix4x4, print_matrix
from transforms import translation, rotate_about_point

logger = logging.getLogger(__name__)


def _matrix_from_cells(cells: Optional[list[float]]) -> Matrix4x4:
    if not cells:
        return Matrix4x4.identity()
    return Matrix4x4(fill=cells)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build, combine and invert 4x4 transform matrices")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every elimination step")
    parser.add_argument("--plot", action="store_true", help="plot the resulting transform with matplotlib")
    commands = parser.add_subparsers(dest="command", required=True)

    translate = commands.add_parser("translate", help="print a translation matrix")
    translate.add_argument("xyz", type=float, nargs=3)

    rotate = commands.add_parser("rotate", help="rotate a matrix (default: identity) around the z axis")
    rotate.add_argument("--angle", type=float, required=True, help="angle in degrees")
    rotate.add_argument("--pivot", type=float, nargs=3, default=[0.0, 0.0, 0.0])
    rotate.add_argument("cells", type=float, nargs="*", help="16 cells, row by row")

    invert = commands.add_parser("invert", help="invert a matrix using Gauss-Jordan elimination")
    invert.add_argument("cells", type=float, nargs=16, help="16 cells, row by row")
    invert.add_argument("--strategy", choices=PIVOT_STRATEGIES, default=settings.PIVOT_STRATEGY)
    invert.add_argument("--max-retries", type=int, default=settings.MAX_RETRIES)
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        if args.command == "translate":
            result = translation(args.xyz)
        elif args.command == "rotate":
            result = _matrix_from_cells(args.cells)
            rotate_about_point(result, args.pivot, args.angle * pi / 180)
        else:
            result = Matrix4x4.identity()
            config = EliminationSettings(pivot_strategy=args.strategy, max_retries=args.max_retries,
                                         pivot_tolerance=settings.PIVOT_TOLERANCE)
            elimination = gauss_jordan_elimination(_matrix_from_cells(args.cells), result, config)
            logger.info(f"Converged after {elimination.passes} passes")
            for skipped in elimination.skipped_pivots:
                logger.info(f"Skipped {skipped.operation} correction at [{skipped.row}][{skipped.col}] in pass {skipped.pass_index}")
    except ValueError as e:
        # EliminationError is a ValueError, as are malformed matrices
        kind = "Elimination failed" if isinstance(e, EliminationError) else "Invalid input"
        print(f"{kind}: {e}", file=sys.stderr)
        return 1
    print_matrix(result)
    if args.plot:
        from visualize import plot_transforms
        plot_transforms([Matrix4x4.identity(), result], labels=["I", args.command], show=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
