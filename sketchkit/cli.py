"""CLI for running sketchkit example sketches."""

from __future__ import annotations

import argparse
import logging
import runpy
import sys
from typing import List, Optional

from .examples import EXAMPLES, example_module, list_examples
from .log import setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sketchkit", description="sketchkit CLI")
    parser.add_argument("example", nargs="?", help="Example name")
    parser.add_argument("--list", action="store_true", help="List available examples")
    parser.add_argument("--seed", type=str, default=None)
    parser.add_argument("--frames", type=int, default=None)
    parser.add_argument("--fps", type=float, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--off-screen", action="store_true", help="Render without a window")
    parser.add_argument("--output", type=str, default=None, help="Save the last frame")
    parser.add_argument("--log-level", type=str.upper, default="INFO", choices=LOG_LEVELS,
                        help="Logging level (default: INFO)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Extra args passed to example")
    return parser


def forwarded_args(args: argparse.Namespace) -> List[str]:
    forwarded: List[str] = []
    if args.off_screen:
        forwarded.append("--off-screen")
    for name in ("seed", "frames", "fps", "width", "height", "output"):
        value = getattr(args, name)
        if value is not None:
            forwarded.extend([f"--{name}", str(value)])
    if args.args:
        if args.args[0] == "--":
            forwarded.extend(args.args[1:])
        else:
            forwarded.extend(args.args)
    return forwarded


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list or not args.example:
        print("Available examples:")
        for name in list_examples():
            print(f"  - {name}: {EXAMPLES[name]}")
        return

    try:
        module = example_module(args.example)
    except ValueError as exc:
        print(f"{exc}. Use --list to see options.")
        sys.exit(1)

    setup_logging(args.log_level)
    forwarded = forwarded_args(args)
    logger.debug("Running %s %s", module, " ".join(forwarded))

    sys.argv = [module] + forwarded
    runpy.run_module(module, run_name="__main__")


if __name__ == "__main__":
    main()
