"""Content-addressed cache of downscaled renditions.

Every (source image, width) pair is run through the codec and the result is
stored as ``<width>-<sha256>.jpg`` under the cache root. Naming by content
means two sources that downscale to identical bytes at the same width share
a single entry, with no extra bookkeeping.

The cache owns its root directory: it is wiped before population and, when
used as a context manager, again on every exit path.
"""

import asyncio
import hashlib
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from downscale_bench.codec import ENCODED_EXTENSION, downscale_image
from downscale_bench.workers import Job, run_pool

#: Name of the subdirectory used inside the platform cache location.
CACHE_SUBDIR = "downscaled-images-for-comparison"

#: Default number of codec jobs in flight during population.
DEFAULT_CONCURRENCY = 32

Codec = Callable[[Path, int], bytes]


def content_digest(data: bytes) -> str:
    """Hex SHA-256 digest of *data*."""
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    """A downscaled rendition stored in the cache.

    Attributes:
        size: Target width the rendition was produced at
        digest: Hex SHA-256 of the stored bytes
        path: Location of the stored file
    """

    size: int
    digest: str
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @staticmethod
    def build_name(size: int, digest: str) -> str:
        """File name for a rendition of *size* whose bytes hash to *digest*."""
        return f"{size}-{digest}{ENCODED_EXTENSION}"

    @classmethod
    def from_path(cls, path: Path) -> "CacheEntry":
        """Parse an entry from its file name.

        Raises:
            ValueError: If the name is not ``<size>-<digest>.jpg``
        """
        stem, sep, digest = path.stem.partition("-")
        if not sep or not stem.isdigit() or not digest or path.suffix != ENCODED_EXTENSION:
            msg = f"Not a cache entry name: {path.name}"
            raise ValueError(msg)
        return cls(size=int(stem), digest=digest, path=path)


class DownscaleCache:
    """Downscaled-image cache rooted at a single directory."""

    def __init__(
        self,
        root: Path,
        codec: Codec = downscale_image,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        """Initialize the cache.

        Args:
            root: Cache root directory (created on population, wiped on clear)
            codec: ``codec(image_path, width) -> bytes`` downscale function
            concurrency: Maximum codec jobs in flight during population
        """
        self.root = root
        self.codec = codec
        self.concurrency = concurrency

    def __enter__(self) -> "DownscaleCache":
        self.clear()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()

    def clear(self) -> None:
        """Remove the cache root and everything below it. Safe if absent."""
        if self.root.exists():
            shutil.rmtree(self.root)

    async def populate(self, images: Sequence[Path], sizes: Sequence[int]) -> list[CacheEntry]:
        """Downscale every image to every size and store the results.

        The root is cleared and recreated first. Codec calls run in worker
        threads, at most ``concurrency`` at a time. The first codec or I/O
        failure aborts population; entries already written stay until the
        next :meth:`clear`.

        Args:
            images: Source image paths
            sizes: Target widths

        Returns:
            Entries present in the cache after population
        """
        self.clear()
        self.root.mkdir(parents=True, exist_ok=True)

        jobs = [self._store_job(image, size) for image in images for size in sizes]
        await run_pool(jobs, self.concurrency)
        return self.entries()

    def _store_job(self, image: Path, size: int) -> Job[CacheEntry]:
        async def job() -> CacheEntry:
            data = await asyncio.to_thread(self.codec, image, size)
            return await asyncio.to_thread(self.store, data, size)

        return job

    def store(self, data: bytes, size: int) -> CacheEntry:
        """Write downscaled bytes under their content-addressed name.

        Rewriting an existing entry is harmless: same name means same bytes.
        """
        digest = content_digest(data)
        path = self.root / CacheEntry.build_name(size, digest)
        path.write_bytes(data)
        return CacheEntry(size=size, digest=digest, path=path)

    def entries(self) -> list[CacheEntry]:
        """All entries currently in the cache, sorted by file name.

        Raises:
            OSError: If the root cannot be listed
            ValueError: If the root holds a file that is not a cache entry
        """
        return [CacheEntry.from_path(p) for p in sorted(self.root.iterdir())]

    def verify(self) -> list[CacheEntry]:
        """Return entries whose stored bytes no longer match their digest."""
        return [
            entry
            for entry in self.entries()
            if content_digest(entry.path.read_bytes()) != entry.digest
        ]
