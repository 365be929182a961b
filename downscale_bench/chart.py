"""Chart request export.

Builds a QuickChart bar-chart request for the aggregated series. The request
is only constructed: nothing is sent and the remote rendering is never
awaited or validated.
"""

import json
from collections.abc import Sequence
from typing import Any

import requests

from downscale_bench.aggregation import AggregatedScore

QUICKCHART_URL = "https://quickchart.io/chart"

DATASET_LABEL = "Mean similarity"


def build_chart_config(scores: Sequence[AggregatedScore]) -> dict[str, Any]:
    """Chart.js bar-chart config with sizes as labels and mean scores as data."""
    return {
        "type": "bar",
        "data": {
            "labels": [s.size for s in scores],
            "datasets": [
                {
                    "label": DATASET_LABEL,
                    "data": [s.mean_score for s in scores],
                }
            ],
        },
    }


def build_chart_url(scores: Sequence[AggregatedScore], base_url: str = QUICKCHART_URL) -> str:
    """URL of a GET request that renders the chart for *scores*.

    Args:
        scores: Aggregated per-size scores, in display order
        base_url: Chart service endpoint

    Returns:
        Fully encoded request URL
    """
    config = json.dumps(build_chart_config(scores), separators=(",", ":"))
    request = requests.Request("GET", base_url, params={"c": config}).prepare()
    return str(request.url)
