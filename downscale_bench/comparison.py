"""All-pairs comparison of cached renditions.

Every entry in the cache is scored against every *other* entry, in both
directions, so ``n`` entries yield ``n * (n - 1)`` results. Comparisons are
global: entries are not restricted to renditions of the same source image or
the same width. Each result is tagged with the width of the *other* entry.
"""

from dataclasses import dataclass

from downscale_bench.cache import DEFAULT_CONCURRENCY, CacheEntry, DownscaleCache
from downscale_bench.similarity import SimilarityOracle
from downscale_bench.workers import Job, run_pool


@dataclass(frozen=True)
class ComparisonResult:
    """Score of one ordered (subject, other) pair.

    Attributes:
        size: Width of the *other* entry
        score: Oracle confidence in ``[0, 1]``
        subject: File name of the subject entry
        other: File name of the entry it was compared against
    """

    size: int
    score: float
    subject: str
    other: str


def expected_pair_count(n: int) -> int:
    """Number of results :meth:`ComparisonEngine.run_all` yields for *n* entries."""
    return n * (n - 1)


class ComparisonEngine:
    """Scores every ordered pair of cache entries with an injected oracle."""

    def __init__(
        self, oracle: SimilarityOracle, concurrency: int = DEFAULT_CONCURRENCY
    ) -> None:
        self.oracle = oracle
        self.concurrency = concurrency

    async def run_all(self, cache: DownscaleCache) -> list[ComparisonResult]:
        """Compare every entry in *cache* against every other entry.

        Returns:
            ``n * (n - 1)`` results ordered by subject, then other

        Raises:
            OSError: If the cache root cannot be listed
            ValueError: If the oracle returns a score outside ``[0, 1]``
        """
        entries = cache.entries()
        jobs = [
            self._compare_job(subject, other)
            for subject in entries
            for other in entries
            if other is not subject
        ]
        return await run_pool(jobs, self.concurrency)

    def _compare_job(self, subject: CacheEntry, other: CacheEntry) -> Job[ComparisonResult]:
        async def job() -> ComparisonResult:
            score = await self.oracle.score(subject, other)
            if not 0.0 <= score <= 1.0:
                msg = f"Oracle score {score} for {subject.name} vs {other.name} is outside [0, 1]"
                raise ValueError(msg)
            return ComparisonResult(
                size=other.size, score=score, subject=subject.name, other=other.name
            )

        return job
