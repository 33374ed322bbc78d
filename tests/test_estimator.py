"""Tests for the planned article estimate."""

from __future__ import annotations

import sys

import pytest

from vaultweaver.core.estimator import estimate_total, planned_total


def test_estimate_matches_full_tree_size() -> None:
    """It should count every node of a complete b-ary forest."""

    assert estimate_total(1, 2, 1) == 3
    assert estimate_total(1, 3, 2) == 13
    assert estimate_total(2, 2, 2) == 14


@pytest.mark.parametrize(("n0", "b", "d"), [(1, 2, 0), (3, 2, 3), (2, 5, 2), (4, 3, 4)])
def test_estimate_equals_geometric_sum(n0: int, b: int, d: int) -> None:
    """It should equal the explicit sum of b^k over all levels."""

    assert estimate_total(n0, b, d) == n0 * sum(b**k for k in range(d + 1))


def test_estimate_special_cases() -> None:
    """It should handle no seeds, no branching and linear chains."""

    assert estimate_total(0, 3, 5) == 0
    assert estimate_total(4, 0, 5) == 4
    assert estimate_total(2, 1, 3) == 8


def test_estimate_clamps_negative_inputs() -> None:
    """It should treat negative inputs as zero."""

    assert estimate_total(-1, 2, 2) == 0
    assert estimate_total(2, -3, 2) == 2
    assert estimate_total(2, 2, -1) == 2


def test_planned_total_applies_cap_only_when_positive() -> None:
    """It should clip to the cap when set and ignore a zero cap."""

    assert planned_total(1, 2, 1, cap=0) == 3
    assert planned_total(1, 2, 1, cap=2) == 2
    assert planned_total(1, 2, 1, cap=10) == 3


def test_estimate_saturates_for_very_deep_trees() -> None:
    """It should return a bounded count instead of overflowing."""

    assert estimate_total(1, 10, 400) == sys.maxsize
    assert estimate_total(3, 2, 5000) == sys.maxsize
    assert planned_total(1, 10, 400, cap=5) == 5
    assert planned_total(1, 10, 400) == sys.maxsize
