"""Size-bucketed aggregation of comparison results."""

from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from downscale_bench.comparison import ComparisonResult


@dataclass(frozen=True)
class AggregatedScore:
    """Mean similarity of all results tagged with one width."""

    size: int
    mean_score: float
    count: int


def scores_dataframe(results: Sequence[ComparisonResult]) -> pd.DataFrame:
    """Build a DataFrame with one row per comparison result.

    Columns: ``size``, ``score``, ``subject``, ``other``.
    """
    return pd.DataFrame(
        [(r.size, r.score, r.subject, r.other) for r in results],
        columns=["size", "score", "subject", "other"],
    )


def reduce_scores(results: Sequence[ComparisonResult]) -> list[AggregatedScore]:
    """Average scores per size.

    Sizes appear in the order they are first seen in *results*; each size
    appears exactly once. The mean covers every score tagged with that size,
    whichever subject or source image produced it.

    Args:
        results: Comparison results

    Returns:
        One :class:`AggregatedScore` per distinct size
    """
    if not results:
        return []

    df = scores_dataframe(results)
    stats = df.groupby("size", sort=False)["score"].agg(["mean", "count"])
    return [
        AggregatedScore(size=int(size), mean_score=float(row["mean"]), count=int(row["count"]))
        for size, row in stats.iterrows()
    ]
