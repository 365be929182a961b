"""Command-line entry point.

Usage:
    downscale-bench DATA_DIR SIZES [options]

    # Compare two widths over every image in ./testdata
    downscale-bench testdata "[100, 200]"

    # Deterministic pixel-difference scoring, 8 jobs in flight
    downscale-bench testdata "[64, 128, 256]" --oracle pixel --concurrency 8
"""

import argparse
import asyncio
import sys
from pathlib import Path

from downscale_bench.cache import DEFAULT_CONCURRENCY
from downscale_bench.config import RunConfig
from downscale_bench.errors import ArgumentError, CodecError
from downscale_bench.pipeline import PipelineRunner
from downscale_bench.similarity import DEFAULT_LATENCY, ORACLES


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="downscale-bench",
        description="Measure how downscaling affects pairwise image similarity.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s testdata "[100, 200]"
  %(prog)s testdata "[64, 128, 256]" --oracle pixel --concurrency 8
""",
    )
    parser.add_argument(
        "data_dir",
        nargs="?",
        help="Directory of category subdirectories containing source images",
    )
    parser.add_argument(
        "sizes",
        nargs="?",
        help='JSON array of target widths, e.g. "[100, 200]"',
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        help="Cache root to use instead of the platform cache location "
        "(wiped at the start and end of every run)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Maximum downscale/comparison jobs in flight (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--oracle",
        choices=ORACLES,
        default="random",
        help="Similarity oracle (default: random)",
    )
    parser.add_argument(
        "--latency",
        type=float,
        default=DEFAULT_LATENCY,
        help=f"Simulated latency of the random oracle in seconds (default: {DEFAULT_LATENCY})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random oracle",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.data_dir is None or args.sizes is None:
        parser.print_usage(sys.stderr)
        print("Error: both DATA_DIR and SIZES are required", file=sys.stderr)
        return 1

    try:
        config = RunConfig.from_args(
            args.data_dir,
            args.sizes,
            cache_dir=args.cache_dir,
            concurrency=args.concurrency,
            oracle=args.oracle,
            latency=args.latency,
            seed=args.seed,
        )
    except ArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    runner = PipelineRunner(config)
    try:
        result = asyncio.run(runner.run())
    except (OSError, CodecError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    print(f"{'Size':>8}  {'Mean score':>10}  {'Count':>6}")
    for score in result.scores:
        print(f"{score.size:>8}  {score.mean_score:>10.4f}  {score.count:>6}")
    print()
    print(f"Chart: {result.chart_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
