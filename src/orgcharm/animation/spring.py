"""Damped harmonic oscillator used to drive animation progress.

Coefficients are precomputed once per (timestep, angular frequency, damping
ratio), so each update is a handful of multiply-adds.  A damping ratio of 1
is critically damped: the value approaches the target as fast as possible
without overshooting.
"""

from __future__ import annotations

import math
import sys

_EPSILON = sys.float_info.epsilon

DEFAULT_FPS = 60
DEFAULT_ANGULAR_FREQUENCY = 6.0
DEFAULT_DAMPING_RATIO = 1.0


def fps(n: int) -> float:
    """Return the timestep for *n* frames per second."""
    return 1.0 / n


class Spring:
    """A precomputed spring step.

    Args:
        delta_time: Seconds advanced by one :meth:`update`.
        angular_frequency: Stiffness (radians per second); negative values
            are treated as zero.
        damping_ratio: ``< 1`` under-damped, ``1`` critically damped,
            ``> 1`` over-damped; negative values are treated as zero.
    """

    def __init__(self, delta_time: float, angular_frequency: float, damping_ratio: float) -> None:
        self.delta_time = delta_time
        self.angular_frequency = max(0.0, angular_frequency)
        self.damping_ratio = max(0.0, damping_ratio)

        self._pos_pos = 1.0
        self._pos_vel = 0.0
        self._vel_pos = 0.0
        self._vel_vel = 1.0

        omega = self.angular_frequency
        zeta = self.damping_ratio
        dt = delta_time

        # No angular frequency: the spring does not move.
        if omega < _EPSILON:
            return

        if zeta > 1.0 + _EPSILON:
            # Over-damped
            za = -omega * zeta
            zb = omega * math.sqrt(zeta * zeta - 1.0)
            z1 = za - zb
            z2 = za + zb

            e1 = math.exp(z1 * dt)
            e2 = math.exp(z2 * dt)

            inv_two_zb = 1.0 / (2.0 * zb)
            e1_over_two_zb = e1 * inv_two_zb
            e2_over_two_zb = e2 * inv_two_zb
            z1e1_over_two_zb = z1 * e1_over_two_zb
            z2e2_over_two_zb = z2 * e2_over_two_zb

            self._pos_pos = e1_over_two_zb * z2 - z2e2_over_two_zb + e2
            self._pos_vel = -e1_over_two_zb + e2_over_two_zb
            self._vel_pos = (z1e1_over_two_zb - z2e2_over_two_zb + e2) * z2
            self._vel_vel = -z1e1_over_two_zb + z2e2_over_two_zb

        elif zeta < 1.0 - _EPSILON:
            # Under-damped
            omega_zeta = omega * zeta
            alpha = omega * math.sqrt(1.0 - zeta * zeta)

            exp_term = math.exp(-omega_zeta * dt)
            cos_term = math.cos(alpha * dt)
            sin_term = math.sin(alpha * dt)

            inv_alpha = 1.0 / alpha
            exp_sin = exp_term * sin_term
            exp_cos = exp_term * cos_term
            exp_omega_zeta_sin_over_alpha = exp_term * omega_zeta * sin_term * inv_alpha

            self._pos_pos = exp_cos + exp_omega_zeta_sin_over_alpha
            self._pos_vel = exp_sin * inv_alpha
            self._vel_pos = -exp_sin * alpha - omega_zeta * exp_omega_zeta_sin_over_alpha
            self._vel_vel = exp_cos - exp_omega_zeta_sin_over_alpha

        else:
            # Critically damped
            exp_term = math.exp(-omega * dt)
            time_exp = dt * exp_term
            time_exp_freq = time_exp * omega

            self._pos_pos = time_exp_freq + exp_term
            self._pos_vel = time_exp
            self._vel_pos = -omega * time_exp_freq
            self._vel_vel = -time_exp_freq + exp_term

    def update(self, pos: float, vel: float, target: float) -> tuple[float, float]:
        """Advance ``(pos, vel)`` one timestep towards *target*."""
        old_pos = pos - target
        new_pos = old_pos * self._pos_pos + vel * self._pos_vel + target
        new_vel = old_pos * self._vel_pos + vel * self._vel_vel
        return new_pos, new_vel


def default_spring() -> Spring:
    return Spring(fps(DEFAULT_FPS), DEFAULT_ANGULAR_FREQUENCY, DEFAULT_DAMPING_RATIO)
