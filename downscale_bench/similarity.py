"""Similarity oracles.

The comparison engine only depends on the :class:`SimilarityOracle`
protocol: one async ``score(a, b)`` call returning a confidence in
``[0, 1]``. Two implementations ship here:

- :class:`RandomOracle` stands in for a remote face-recognition service:
  a fixed-latency wait followed by a random score.
- :class:`PixelSimilarityOracle` is a cheap deterministic scorer based on
  the mean absolute difference of grayscale thumbnails.
"""

import asyncio
import random
from typing import Protocol

import numpy as np
from PIL import Image

from downscale_bench.cache import CacheEntry

#: Simulated round-trip time of the random oracle, in seconds.
DEFAULT_LATENCY = 0.1

#: Side length of the thumbnails compared by the pixel oracle.
THUMBNAIL_SIZE = 64


class SimilarityOracle(Protocol):
    """Anything that can score a pair of cache entries."""

    async def score(self, a: CacheEntry, b: CacheEntry) -> float:
        """Return a similarity confidence in ``[0, 1]`` for *a* and *b*."""
        ...


class RandomOracle:
    """Stub oracle: waits a fixed latency, then returns a random score."""

    def __init__(self, latency: float = DEFAULT_LATENCY, seed: int | None = None) -> None:
        self.latency = latency
        self._rng = random.Random(seed)

    async def score(self, a: CacheEntry, b: CacheEntry) -> float:
        await asyncio.sleep(self.latency)
        return self._rng.random()


class PixelSimilarityOracle:
    """Scores pairs by ``1 - mean(|a - b|) / 255`` on grayscale thumbnails.

    Both images are squashed to ``THUMBNAIL_SIZE`` squared so that renditions
    of different widths can be compared. Identical images score 1.0.
    """

    def __init__(self, thumbnail_size: int = THUMBNAIL_SIZE) -> None:
        self.thumbnail_size = thumbnail_size

    def _load(self, entry: CacheEntry) -> np.ndarray:
        with Image.open(entry.path) as img:
            gray = img.convert("L").resize(
                (self.thumbnail_size, self.thumbnail_size), Image.Resampling.BILINEAR
            )
        return np.asarray(gray, dtype=np.float64)

    def compare(self, a: CacheEntry, b: CacheEntry) -> float:
        diff = np.abs(self._load(a) - self._load(b))
        return float(1.0 - diff.mean() / 255.0)

    async def score(self, a: CacheEntry, b: CacheEntry) -> float:
        return await asyncio.to_thread(self.compare, a, b)


#: Oracle names accepted on the command line.
ORACLES = ("random", "pixel")


def create_oracle(
    name: str, latency: float = DEFAULT_LATENCY, seed: int | None = None
) -> SimilarityOracle:
    """Build an oracle by name.

    Raises:
        ValueError: If *name* is not one of :data:`ORACLES`
    """
    if name == "random":
        return RandomOracle(latency=latency, seed=seed)
    if name == "pixel":
        return PixelSimilarityOracle()
    msg = f"Unknown oracle: {name!r} (expected one of {', '.join(ORACLES)})"
    raise ValueError(msg)
