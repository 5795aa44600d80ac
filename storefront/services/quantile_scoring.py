"""
Quantile scoring

Ranks a population by a numeric key and splits the ranking into Q contiguous
buckets of ceil(N / Q) items, scoring each item 1..Q by its bucket.
"""
import math
from typing import Any, Callable, List, Sequence, Tuple

DEFAULT_QUANTILES = 5


def assign_quantile_scores(
    items: Sequence[Any],
    key: Callable[[Any], float],
    quantiles: int = DEFAULT_QUANTILES,
    descending: bool = False,
) -> List[Tuple[Any, int]]:
    """
    Return (item, score) pairs in ranked order.

    Items are stable-sorted by key (ascending unless descending=True); the
    item at ranked position i scores min(Q, i // ceil(N / Q) + 1), so the
    first bucket in sort order always scores 1. Equal keys keep their input
    order and may straddle a bucket boundary.

    Recency passes descending=True over days since last purchase rather than
    scoring the stalest-first ranking as Q - i // ceil(N / Q), which would
    hand the stalest customers the top score.
    """
    if quantiles < 1:
        raise ValueError("quantiles must be at least 1")
    if not items:
        return []

    ranked = sorted(items, key=key, reverse=descending)
    bucket_size = math.ceil(len(ranked) / quantiles)
    return [
        (item, min(quantiles, i // bucket_size + 1))
        for i, item in enumerate(ranked)
    ]
