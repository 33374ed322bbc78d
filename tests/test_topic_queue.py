"""Tests for the topic queue and processed set."""

from __future__ import annotations

from vaultweaver.core.stop import StopController, StopReason
from vaultweaver.core.topic_queue import TopicQueue
from vaultweaver.models.topic import Topic


def test_queue_is_fifo() -> None:
    """It should pop topics in push order and return None when empty."""

    q = TopicQueue()
    q.push(Topic(theme="a"))
    q.push(Topic(theme="b", level=1))

    assert [q.pop().theme, q.pop().theme] == ["a", "b"]
    assert q.pop() is None
    assert not q


def test_push_skips_queued_and_processed_themes() -> None:
    """It should not queue a theme twice or queue a processed theme."""

    q = TopicQueue()
    assert q.push(Topic(theme="a")) is True
    assert q.push(Topic(theme="a", level=2)) is False

    q.mark_processed("b")
    assert q.push(Topic(theme="b")) is False
    assert len(q) == 1


def test_theme_identity_is_case_sensitive() -> None:
    """It should treat themes differing only in case as distinct."""

    q = TopicQueue()
    assert q.extend([Topic(theme="AI"), Topic(theme="ai")]) == 2


def test_popped_theme_can_be_requeued_until_processed() -> None:
    """It should only remember queued themes while they are waiting."""

    q = TopicQueue()
    q.push(Topic(theme="a"))
    q.pop()
    assert not q.is_queued("a")
    assert q.push(Topic(theme="a")) is True


def test_processed_set_keeps_start_order_and_is_idempotent() -> None:
    """It should list processed themes in first-marked order without duplicates."""

    q = TopicQueue()
    for theme in ["x", "y", "x", "z"]:
        q.mark_processed(theme)

    assert q.processed_themes() == ["x", "y", "z"]
    assert q.processed_count == 3


def test_stop_controller_keeps_first_reason() -> None:
    """It should engage once and never change reason afterwards."""

    stop = StopController()
    assert not stop.stopped

    assert stop.reach_cap() is True
    assert stop.request_stop() is False
    assert stop.stopped
    assert stop.reason == StopReason.CAP
