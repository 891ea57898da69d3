"""Tests for pawfeed.core.listeners."""

from __future__ import annotations

import logging

import pytest

from pawfeed.core.listeners import ListenerSet


class TestListenerSet:
    """Tests for ListenerSet."""

    def test_emit_in_subscription_order(self) -> None:
        seen: list[tuple[str, int]] = []
        listeners: ListenerSet[int] = ListenerSet("test")
        listeners.subscribe(lambda v: seen.append(("a", v)))
        listeners.subscribe(lambda v: seen.append(("b", v)))

        listeners.emit(7)

        assert seen == [("a", 7), ("b", 7)]
        assert len(listeners) == 2

    def test_unsubscribe_twice_is_safe(self) -> None:
        listeners: ListenerSet[int] = ListenerSet("test")
        unsubscribe = listeners.subscribe(lambda v: None)
        unsubscribe()
        unsubscribe()
        assert len(listeners) == 0

    def test_failing_listener_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        seen: list[int] = []
        listeners: ListenerSet[int] = ListenerSet("test")

        def broken(value: int) -> None:
            raise RuntimeError("render failed")

        listeners.subscribe(broken)
        listeners.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="pawfeed.listeners"):
            listeners.emit(1)

        assert seen == [1]
        assert "listener" in caplog.text
