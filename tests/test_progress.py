"""Tests for the phase-based progress tracker."""

from __future__ import annotations

from habitvault.services.progress import ProgressTracker


def test_reset_starts_history_at_zero():
    tracker = ProgressTracker()
    tracker.advance(40)
    tracker.reset()
    assert tracker.value == 0
    assert tracker.history == [0]


def test_advance_never_moves_backwards():
    tracker = ProgressTracker()
    tracker.reset()
    tracker.advance(50)
    tracker.advance(30)
    assert tracker.value == 50
    assert tracker.history == [0, 50, 50]


def test_values_are_clamped():
    tracker = ProgressTracker()
    assert tracker.advance(-5) == 0
    assert tracker.advance(150) == 100


def test_interpolate_between_phase_bounds():
    tracker = ProgressTracker()
    tracker.advance(40)
    assert tracker.interpolate(40, 80, 1, 4) == 50
    assert tracker.interpolate(40, 80, 4, 4) == 80


def test_interpolate_without_work_jumps_to_end():
    tracker = ProgressTracker()
    assert tracker.interpolate(40, 80, 0, 0) == 80


def test_subscribers_receive_updates_until_unsubscribed():
    tracker = ProgressTracker()
    seen: list[int] = []
    unsubscribe = tracker.subscribe(seen.append)
    tracker.reset()
    tracker.advance(10)
    unsubscribe()
    tracker.advance(90)
    assert seen == [0, 10]
    assert tracker.value == 90
