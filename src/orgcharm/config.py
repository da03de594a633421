"""Viewer configuration, with overrides from ``ORGCHARM_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from orgcharm.animation.spring import (
    DEFAULT_ANGULAR_FREQUENCY,
    DEFAULT_DAMPING_RATIO,
    DEFAULT_FPS,
    Spring,
    fps,
)
from orgcharm.highlight import DEFAULT_CODE_STYLE

ENV_PREFIX = "ORGCHARM_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """An invalid configuration value; ``field`` names the offending setting."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class ViewerConfig:
    fps: int = DEFAULT_FPS
    angular_frequency: float = DEFAULT_ANGULAR_FREQUENCY
    damping_ratio: float = DEFAULT_DAMPING_RATIO
    animations: bool = True
    code_style: str = DEFAULT_CODE_STYLE
    scroll_step: int = 1

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ConfigError(f"fps must be positive, got {self.fps}", "fps")
        if self.scroll_step <= 0:
            raise ConfigError(f"scroll_step must be positive, got {self.scroll_step}", "scroll_step")
        if self.angular_frequency < 0:
            raise ConfigError(
                f"angular_frequency must not be negative, got {self.angular_frequency}", "angular_frequency"
            )
        if self.damping_ratio < 0:
            raise ConfigError(
                f"damping_ratio must not be negative, got {self.damping_ratio}", "damping_ratio"
            )

    @property
    def tick_interval(self) -> float:
        """Seconds between animation ticks."""
        return fps(self.fps)

    def make_spring(self) -> Spring:
        return Spring(self.tick_interval, self.angular_frequency, self.damping_ratio)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ViewerConfig:
        """Build a config from defaults overridden by ``ORGCHARM_*`` variables.

        Recognised: ``ORGCHARM_FPS``, ``ORGCHARM_ANGULAR_FREQUENCY``,
        ``ORGCHARM_DAMPING_RATIO``, ``ORGCHARM_ANIMATIONS``,
        ``ORGCHARM_CODE_STYLE``, ``ORGCHARM_SCROLL_STEP``.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        for name, parse in (
            ("fps", int),
            ("angular_frequency", float),
            ("damping_ratio", float),
            ("animations", _parse_bool),
            ("code_style", str),
            ("scroll_step", int),
        ):
            var = ENV_PREFIX + name.upper()
            raw = env.get(var)
            if raw is None:
                continue
            try:
                overrides[name] = parse(raw.strip())
            except ValueError as e:
                raise ConfigError(f"{var}: invalid value {raw!r}", name) from e

        try:
            return replace(cls(), **overrides)
        except ConfigError as e:
            if e.field in overrides:
                var = ENV_PREFIX + e.field.upper()
                raise ConfigError(f"{var}: {e}", e.field) from e
            raise


def _parse_bool(value: str) -> bool:
    lower = value.lower()
    if lower in _TRUE:
        return True
    if lower in _FALSE:
        return False
    raise ValueError(value)
