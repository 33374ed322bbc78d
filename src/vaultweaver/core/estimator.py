"""Planned article count for a run."""

from __future__ import annotations

import math
import sys


def estimate_total(seed_count: int, branching: int, depth: int) -> int:
    """Size of a complete `branching`-ary forest of the given depth.

    Args:
        seed_count: Number of root topics.
        branching: Children per article.
        depth: Maximum level below the roots.

    Returns:
        Number of articles a full expansion would produce. Negative inputs count as zero.
        Trees too large to count saturate at ``sys.maxsize``.
    """

    n0 = max(0, seed_count)
    b = max(0, branching)
    d = max(0, depth)

    if n0 == 0:
        return 0
    if b == 0:
        return n0
    if b == 1:
        return n0 * (d + 1)
    try:
        estimate = n0 * ((float(b) ** (d + 1) - 1) / (b - 1))
    except OverflowError:
        return sys.maxsize
    if not math.isfinite(estimate) or estimate >= sys.maxsize:
        return sys.maxsize
    return int(round(estimate))


def planned_total(seed_count: int, branching: int, depth: int, cap: int = 0) -> int:
    """The estimate clipped to the article cap when one is set (`cap > 0`)."""

    estimated = estimate_total(seed_count, branching, depth)
    if cap > 0:
        return min(estimated, cap)
    return estimated
