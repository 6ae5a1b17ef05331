import argparse
import logging
import sys
from typing import Optional, Sequence

from geokernel import get_kernel_config, get_snap_position
from geokernel.demo import build_scene, describe, run

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="2D construction geometry kernel")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("demo", help="Build a small construction and move one of its points")
    snap = sub.add_parser("snap", help="Snap a cursor position against the demo construction")
    snap.add_argument("x", type=float)
    snap.add_argument("y", type=float)
    snap.add_argument(
        "--threshold",
        type=float,
        default=None,
        help=f"Snap distance (default: {get_kernel_config().snap_threshold:g})",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.command == "demo":
        run()
        return

    scene = build_scene()
    logger.info("Snapping (%g, %g) against %d element(s)", args.x, args.y, len(scene))
    result = get_snap_position(args.x, args.y, scene, threshold=args.threshold)
    if not result.snapped:
        print(f"No snap: ({result.x:.6f}, {result.y:.6f})")
        return
    print(f"{result.snap_type}: ({result.x:.6f}, {result.y:.6f})")
    if result.label:
        print(f"  label: {result.label}")
    if result.snapped_to:
        print(f"  element: {result.snapped_to}")
    if result.intersection_elements:
        print(f"  between: {', '.join(result.intersection_elements)}")
    logger.debug("Scene:\n%s", describe(scene))


if __name__ == "__main__":
    main(sys.argv[1:])
