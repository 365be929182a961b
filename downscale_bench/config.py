"""Run configuration.

Holds the parameters of one comparison run and validates the raw
command-line values they come from.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from downscale_bench.cache import CACHE_SUBDIR, DEFAULT_CONCURRENCY
from downscale_bench.errors import ArgumentError
from downscale_bench.similarity import DEFAULT_LATENCY


def default_cache_dir() -> Path:
    """Cache root under ``$XDG_CACHE_HOME`` (falling back to ``~/.cache``)."""
    base = os.environ.get("XDG_CACHE_HOME")
    cache_home = Path(base) if base else Path.home() / ".cache"
    return cache_home / CACHE_SUBDIR


def _parse_size(value: Any) -> int:
    # bool is an int subclass; JSON true/false are not widths
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"Size must be a number, got {value!r}"
        raise ArgumentError(msg)
    if isinstance(value, float) and not value.is_integer():
        msg = f"Size must be a whole number of pixels, got {value}"
        raise ArgumentError(msg)
    if value <= 0:
        msg = f"Size must be positive, got {value}"
        raise ArgumentError(msg)
    return int(value)


def parse_sizes(text: str) -> list[int]:
    """Parse the sizes argument into a list of widths.

    Accepts a JSON array of positive whole numbers, e.g. ``"[100, 200]"``.
    Duplicates are dropped, keeping the first occurrence.

    Args:
        text: Raw command-line value

    Returns:
        Widths in the order given

    Raises:
        ArgumentError: If *text* is not a non-empty JSON array of positive
            whole numbers
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Sizes must be a JSON array of numbers: {e}"
        raise ArgumentError(msg) from e

    if not isinstance(data, list):
        msg = f"Sizes must be a JSON array of numbers, got {type(data).__name__}"
        raise ArgumentError(msg)
    if not data:
        msg = "Sizes must contain at least one width"
        raise ArgumentError(msg)

    sizes: list[int] = []
    for value in data:
        size = _parse_size(value)
        if size not in sizes:
            sizes.append(size)
    return sizes


@dataclass
class RunConfig:
    """Parameters of a single comparison run."""

    data_dir: Path
    sizes: list[int]
    cache_dir: Path
    concurrency: int = DEFAULT_CONCURRENCY
    oracle: str = "random"
    latency: float = DEFAULT_LATENCY
    seed: int | None = None

    @classmethod
    def from_args(
        cls,
        data_dir: str,
        sizes: str,
        cache_dir: Path | None = None,
        **options: Any,
    ) -> "RunConfig":
        """Validate raw command-line values and build a config.

        Raises:
            ArgumentError: If the data directory is not accessible or the
                sizes are malformed
        """
        path = Path(data_dir).resolve()
        if not path.is_dir():
            msg = f"Data directory not found or not a directory: {path}"
            raise ArgumentError(msg)
        if not os.access(path, os.R_OK | os.X_OK):
            msg = f"Data directory is not readable: {path}"
            raise ArgumentError(msg)

        concurrency = options.get("concurrency", DEFAULT_CONCURRENCY)
        if concurrency < 1:
            msg = f"Concurrency must be at least 1, got {concurrency}"
            raise ArgumentError(msg)

        return cls(
            data_dir=path,
            sizes=parse_sizes(sizes),
            cache_dir=cache_dir if cache_dir is not None else default_cache_dir(),
            **options,
        )
