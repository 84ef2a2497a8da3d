"""Main CLI entry point for the storyboard tool.

Usage:
    python -m storyboarder.cli --input research.md --output ./out
    python -m storyboarder.cli --input research.md --output ./out --mock
    python -m storyboarder.cli --input research.md --output ./out --mode strict

Writes into the output directory:
    storyboard.yaml              - human-readable storyboard, as returned
    storyboard.json              - machine-readable storyboard, as returned
    Video.tsx                    - Remotion composition stub
    public/voiceovers/<id>.mp3   - empty placeholder per slide
    EXEC_SUMMARY.txt             - trailing summary table, if any
"""

import argparse
import sys

from pydantic import ValidationError

from ..config import Config, load_config
from ..errors import ConfigurationError, StoryboarderError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storyboarder",
        description="Convert research text into a Remotion storyboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", help="Path to the research text file")
    parser.add_argument("--output", help="Output directory (created if missing)")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument(
        "--mode",
        choices=["strict", "lenient"],
        help="strict fails on an unparseable YAML block, lenient only warns",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the mock completion provider (no network, for testing)",
    )
    parser.add_argument("--model", help="Completion model to use")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        help="Retries on transport errors, 429 and 5xx responses",
    )
    parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help="Treat validation warnings as errors",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    ``--help`` exits with status 0 through argparse.

    Raises:
        ConfigurationError: If --input or --output is missing
    """
    args = build_parser().parse_args(argv)
    if not args.input:
        raise ConfigurationError("Missing --input argument")
    if not args.output:
        raise ConfigurationError("Missing --output argument")
    return args


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the loaded config."""
    if args.mock:
        config.llm.provider = "mock"
    if args.model:
        config.llm.model = args.model
    if args.timeout is not None:
        config.llm.timeout_seconds = args.timeout
    if args.max_retries is not None:
        config.llm.max_retries = args.max_retries
    if args.mode:
        config.validation.mode = args.mode
    if args.fail_on_findings:
        config.validation.fail_on_findings = True
    return config


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    from ..pipeline import StoryboardPipeline

    try:
        args = parse_args(argv)
        config = apply_overrides(load_config(args.config), args)
        pipeline = StoryboardPipeline(config)
        pipeline.run(args.input, args.output)
    except (StoryboarderError, ValidationError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0
