"""Tests for orgcharm.animation.state -- animation progress bookkeeping."""

from __future__ import annotations

import random

from orgcharm.animation import AnimationState


def run_to_completion(state: AnimationState, limit: int = 200) -> int:
    for n in range(1, limit + 1):
        if not state.tick():
            return n
    raise AssertionError("animation did not finish")


class TestAnimationState:
    def test_idle_tick_is_noop(self) -> None:
        state = AnimationState()
        assert state.tick() is False
        assert state.progress == 0.0
        assert state.kind == "none"

    def test_start_resets_progress(self) -> None:
        state = AnimationState(progress=0.7, velocity=1.5)
        state.start("reveal", to_content="x")
        assert (state.kind, state.progress, state.velocity) == ("reveal", 0.0, 0.0)
        assert state.active

    def test_completion_snaps_and_stops(self) -> None:
        state = AnimationState()
        state.start("reveal", to_content="x")
        run_to_completion(state)
        assert state.progress == 1.0
        assert state.velocity == 0.0
        assert state.kind == "none"

        assert state.tick() is False
        assert state.progress == 1.0

    def test_progress_rises_while_running(self) -> None:
        state = AnimationState()
        state.start("transition", "a", "b")
        state.tick()
        first = state.progress
        state.tick()
        assert 0.0 < first < state.progress < 1.0

    def test_stop_is_idempotent(self) -> None:
        state = AnimationState()
        state.start("reveal")
        state.stop()
        state.stop()
        assert not state.active
        assert state.velocity == 0.0

    def test_frame_when_idle_is_target(self) -> None:
        state = AnimationState(to_content="final")
        assert state.frame(10, 1) == "final"

    def test_reveal_frame_at_start_is_blank(self) -> None:
        state = AnimationState()
        state.start("reveal", to_content="hello")
        assert state.frame(5, 1) == "     "

    def test_transition_frame_at_start_is_source(self) -> None:
        state = AnimationState()
        state.start("transition", from_content="old", to_content="new")
        assert state.frame(3, 1, random.Random(1)) == "old"
