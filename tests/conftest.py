"""Shared test fixtures and helpers.

Provides common fixtures used across multiple test modules to eliminate
duplication. Each test module can still define its own specialised
fixtures when needed.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from downscale_bench.cache import CacheEntry
from downscale_bench.config import RunConfig

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def create_test_image(
    path: Path,
    size: tuple[int, int] = (64, 64),
    mode: str = "RGB",
    color: tuple[int, ...] = (128, 128, 128),
) -> Path:
    """Create a small test image and return its path."""
    img = Image.new(mode, size, color=color)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path


def _name_codec(image: Path, width: int) -> bytes:
    """Deterministic stand-in for the image codec (bytes depend on name and width)."""
    return f"{Path(image).name}@{width}".encode()


class RecordingOracle:
    """Oracle returning a fixed score and remembering every pair it saw."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value
        self.calls: list[tuple[str, str]] = []

    async def score(self, a: CacheEntry, b: CacheEntry) -> float:
        self.calls.append((a.name, b.name))
        return self.value


class SizeOracle:
    """Oracle scoring by the subject's width so per-size means are predictable."""

    async def score(self, a: CacheEntry, b: CacheEntry) -> float:
        return a.size / 1000


# ---------------------------------------------------------------------------
# Helper fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Factory writing a solid-colour test image (see :func:`create_test_image`)."""
    return create_test_image


@pytest.fixture
def fake_codec() -> Callable[[Path, int], bytes]:
    """Codec whose output depends only on the source file name and width."""
    return _name_codec


@pytest.fixture
def make_oracle() -> Callable[..., RecordingOracle]:
    """Factory for recording oracles: ``make_oracle(0.4)`` always scores 0.4."""
    return RecordingOracle


@pytest.fixture
def size_oracle() -> SizeOracle:
    """Oracle scoring each pair as ``subject.size / 1000``."""
    return SizeOracle()


# ---------------------------------------------------------------------------
# Data-directory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Two categories with one distinct image each."""
    root = tmp_path / "testdata"
    create_test_image(root / "alice" / "a.png", size=(300, 200), color=(200, 30, 30))
    create_test_image(root / "bob" / "b.png", size=(400, 400), color=(20, 40, 220))
    return root


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Cache root inside the test's temporary directory (not created)."""
    return tmp_path / "cache" / "downscaled"


@pytest.fixture
def run_config(data_dir: Path, cache_dir: Path) -> RunConfig:
    """Config for the two-image data directory at widths 100 and 200."""
    return RunConfig(
        data_dir=data_dir,
        sizes=[100, 200],
        cache_dir=cache_dir,
        concurrency=4,
        latency=0.0,
        seed=1,
    )
