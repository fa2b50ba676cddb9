"""
Command-line interface for the highlight pipeline.
"""

import argparse
import logging
import sys

from .agent import CLEAN_TYPES, STEPS, Agent
from .config import load_settings
from .io_ffmpeg import FFmpegNotFoundError, check_ffmpeg

logger = logging.getLogger("reelcut")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def console_prompt(question: str) -> str:
    """Ask on stdin; EOF counts as an empty answer."""
    try:
        return input(question).strip()
    except EOFError:
        return ""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(
        prog="reelcut",
        description="Highlight pipeline: transcribe, select, cut, approve and assemble videos",
    )
    ap.add_argument("--base-dir", default=None, help="Folder holding upload/, separated-audio/, ready-video/")
    ap.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; existing outputs are kept and interactive steps are skipped",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    sub = ap.add_subparsers(dest="command")
    sub.add_parser("run", help="extract -> transcribe -> analyze -> organize for every upload")
    step = sub.add_parser("step", help="Run a single pipeline step")
    step.add_argument("name", choices=STEPS)
    sub.add_parser("status", help="Show the inferred stage of every known video")
    clean = sub.add_parser("clean", help="Empty pipeline folders")
    clean.add_argument("target", choices=CLEAN_TYPES)

    args = ap.parse_args(argv)
    if args.command is None:
        ap.print_help()
        sys.exit(0)
    return args


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    settings = load_settings(args.base_dir)
    agent = Agent(settings, prompt=None if args.non_interactive else console_prompt)

    if args.command == "status":
        for name, stage in agent.status().items():
            print(f"{name}: {stage.name if stage else 'unknown'}")
        return 0

    if args.command == "clean":
        agent.clean(args.target)
        return 0

    try:
        check_ffmpeg()
    except FFmpegNotFoundError as e:
        logger.error("%s", e)
        return 1

    if args.command == "run":
        results = agent.process_all()
        return 0 if all(r.success for r in results) else 1

    outcomes = agent.run_step(args.name)
    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
