"""Downscale → compare → aggregate pipeline.

Runs one evaluation end to end:

1. Discover source images under the data directory.
2. Populate the content-addressed cache with one rendition per
   (image, width) pair.
3. Score every cached rendition against every other one.
4. Average the scores per width and build the chart request.

The cache root is cleared before population and again on every exit path,
including failures in discovery, population or comparison. Nothing is kept
between runs.
"""

import time
from dataclasses import dataclass
from pathlib import Path

from downscale_bench.aggregation import AggregatedScore, reduce_scores
from downscale_bench.cache import CacheEntry, Codec, DownscaleCache
from downscale_bench.chart import build_chart_url
from downscale_bench.codec import downscale_image
from downscale_bench.comparison import ComparisonEngine, ComparisonResult, expected_pair_count
from downscale_bench.config import RunConfig
from downscale_bench.discovery import discover_images
from downscale_bench.similarity import SimilarityOracle, create_oracle


def _format_duration(seconds: float) -> str:
    """Format seconds as ``1h 02m 03s`` / ``5m 03s`` / ``12s``."""
    if seconds < 0:
        return "—"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    if m > 0:
        return f"{m}m {s:02d}s"
    return f"{s}s"


@dataclass
class PipelineResult:
    """Everything produced by one pipeline run."""

    images: list[Path]
    entries: list[CacheEntry]
    results: list[ComparisonResult]
    scores: list[AggregatedScore]
    chart_url: str
    elapsed: float = 0.0


class PipelineRunner:
    """Runs the downscale comparison pipeline for a :class:`RunConfig`."""

    def __init__(
        self,
        config: RunConfig,
        oracle: SimilarityOracle | None = None,
        codec: Codec = downscale_image,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Run parameters
            oracle: Similarity oracle; built from ``config.oracle`` if omitted
            codec: Downscale function used to populate the cache
        """
        self.config = config
        self.oracle = oracle or create_oracle(
            config.oracle, latency=config.latency, seed=config.seed
        )
        self.cache = DownscaleCache(
            config.cache_dir, codec=codec, concurrency=config.concurrency
        )
        self.engine = ComparisonEngine(self.oracle, concurrency=config.concurrency)

    async def run(self) -> PipelineResult:
        """Run the pipeline once.

        Returns:
            :class:`PipelineResult` with per-size scores and the chart URL

        Raises:
            OSError: On discovery, cache or listing failures
            CodecError: If a source file cannot be downscaled
        """
        config = self.config
        start_time = time.monotonic()

        print(f"Data directory: {config.data_dir}")
        print(f"Sizes: {', '.join(str(s) for s in config.sizes)}")
        print(f"Cache: {config.cache_dir}")
        print(f"Concurrency: {config.concurrency}")
        print()

        with self.cache:
            images = discover_images(config.data_dir)
            print(f"Found {len(images)} source images")

            entries = await self.cache.populate(images, config.sizes)
            print(
                f"Cached {len(entries)} renditions "
                f"({len(images) * len(config.sizes)} downscale tasks)"
            )

            print(f"Running {expected_pair_count(len(entries))} comparisons...")
            results = await self.engine.run_all(self.cache)

        scores = reduce_scores(results)
        chart_url = build_chart_url(scores)
        elapsed = time.monotonic() - start_time

        print(f"\nPipeline complete in {_format_duration(elapsed)}")
        print(f"  Comparisons: {len(results)}")

        return PipelineResult(
            images=images,
            entries=entries,
            results=results,
            scores=scores,
            chart_url=chart_url,
            elapsed=elapsed,
        )
