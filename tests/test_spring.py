"""Tests for orgcharm.animation.spring -- the damped spring."""

from __future__ import annotations

import pytest

from orgcharm.animation.spring import Spring, default_spring, fps


def run(spring: Spring, ticks: int) -> list[float]:
    pos, vel = 0.0, 0.0
    positions = []
    for _ in range(ticks):
        pos, vel = spring.update(pos, vel, 1.0)
        positions.append(pos)
    return positions


class TestSpring:
    def test_fps(self) -> None:
        assert fps(60) == pytest.approx(1 / 60)

    def test_critically_damped_is_monotone_and_bounded(self) -> None:
        positions = run(default_spring(), 200)
        for a, b in zip(positions, positions[1:]):
            assert b >= a
        assert max(positions) <= 1.0

    def test_default_spring_settles(self) -> None:
        spring = default_spring()
        pos, vel = 0.0, 0.0
        for _ in range(200):
            pos, vel = spring.update(pos, vel, 1.0)
            if pos > 0.99 and abs(vel) < 0.005:
                break
        else:
            pytest.fail("spring did not settle within 200 ticks")

    def test_zero_frequency_does_not_move(self) -> None:
        spring = Spring(fps(60), 0.0, 1.0)
        pos, vel = spring.update(0.3, 0.2, 1.0)
        assert pos == pytest.approx(0.3)
        assert vel == pytest.approx(0.2)

    def test_negative_parameters_clamp_to_zero(self) -> None:
        spring = Spring(fps(60), -5.0, -1.0)
        assert spring.angular_frequency == 0.0
        assert spring.damping_ratio == 0.0
        assert spring.update(0.5, 0.0, 1.0) == pytest.approx((0.5, 0.0))

    def test_under_damped_overshoots(self) -> None:
        positions = run(Spring(fps(60), 6.0, 0.3), 200)
        assert max(positions) > 1.0

    def test_over_damped_is_slower(self) -> None:
        critical = run(Spring(fps(60), 6.0, 1.0), 60)[-1]
        over = run(Spring(fps(60), 6.0, 2.0), 60)[-1]
        assert over < critical
        assert 0.0 < over < 1.0
