"""Tests for the all-pairs comparison engine."""

from collections.abc import Callable
from pathlib import Path

import pytest
import pytest_asyncio

from downscale_bench.cache import DownscaleCache
from downscale_bench.comparison import ComparisonEngine, expected_pair_count


@pytest_asyncio.fixture
async def populated_cache(
    tmp_path: Path, cache_dir: Path, fake_codec: Callable[[Path, int], bytes]
) -> DownscaleCache:
    """Cache holding 2 images × sizes [100, 200] = 4 entries."""
    cache = DownscaleCache(cache_dir, codec=fake_codec)
    await cache.populate([tmp_path / "a.png", tmp_path / "b.png"], [100, 200])
    return cache


def test_expected_pair_count() -> None:
    assert expected_pair_count(0) == 0
    assert expected_pair_count(1) == 0
    assert expected_pair_count(4) == 12


@pytest.mark.asyncio
async def test_scores_every_ordered_pair(populated_cache: DownscaleCache, make_oracle) -> None:
    oracle = make_oracle()
    engine = ComparisonEngine(oracle, concurrency=3)

    results = await engine.run_all(populated_cache)

    names = [e.name for e in populated_cache.entries()]
    assert len(results) == expected_pair_count(4) == 12
    assert all(r.subject != r.other for r in results)
    assert sorted(oracle.calls) == sorted((s, o) for s in names for o in names if s != o)


@pytest.mark.asyncio
async def test_size_comes_from_other_entry(populated_cache: DownscaleCache, make_oracle) -> None:
    results = await ComparisonEngine(make_oracle()).run_all(populated_cache)

    for r in results:
        assert r.size == int(r.other.split("-")[0])
    assert any(r.size != int(r.subject.split("-")[0]) for r in results)


@pytest.mark.asyncio
async def test_results_ordered_by_subject(populated_cache: DownscaleCache, make_oracle) -> None:
    results = await ComparisonEngine(make_oracle()).run_all(populated_cache)

    subjects = [r.subject for r in results]
    assert subjects == sorted(subjects)


@pytest.mark.asyncio
async def test_single_entry_has_no_pairs(
    tmp_path: Path, cache_dir: Path, fake_codec: Callable[[Path, int], bytes], make_oracle
) -> None:
    cache = DownscaleCache(cache_dir, codec=fake_codec)
    await cache.populate([tmp_path / "a.png"], [100])

    assert await ComparisonEngine(make_oracle()).run_all(cache) == []


@pytest.mark.asyncio
async def test_out_of_range_score_rejected(populated_cache: DownscaleCache, make_oracle) -> None:
    engine = ComparisonEngine(make_oracle(1.5))

    with pytest.raises(ValueError, match="outside"):
        await engine.run_all(populated_cache)


@pytest.mark.asyncio
async def test_missing_root_raises(cache_dir: Path, make_oracle) -> None:
    with pytest.raises(FileNotFoundError):
        await ComparisonEngine(make_oracle()).run_all(DownscaleCache(cache_dir))
