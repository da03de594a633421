"""Per-view animation state advanced by spring ticks."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Literal

from orgcharm.animation.reveal import reveal
from orgcharm.animation.spring import Spring, default_spring
from orgcharm.animation.transition import transition

logger = logging.getLogger(__name__)

AnimationKind = Literal["none", "reveal", "transition"]

PROGRESS_EPSILON = 0.01
VELOCITY_EPSILON = 0.005


@dataclass
class AnimationState:
    """Progress of the running animation, if any.

    ``kind == "none"`` means idle; :meth:`tick` is then a no-op.
    """

    kind: AnimationKind = "none"
    progress: float = 0.0
    velocity: float = 0.0
    target: float = 1.0
    from_content: str = ""
    to_content: str = ""
    spring: Spring = field(default_factory=default_spring)

    @property
    def active(self) -> bool:
        return self.kind != "none"

    def start(self, kind: AnimationKind, from_content: str = "", to_content: str = "") -> None:
        """Begin a new animation from progress 0, replacing any running one."""
        self.kind = kind
        self.progress = 0.0
        self.velocity = 0.0
        self.target = 1.0
        self.from_content = from_content
        self.to_content = to_content
        logger.debug("Animation %s started", kind)

    def stop(self) -> None:
        """Deactivate the animation; safe to call repeatedly."""
        if self.kind != "none":
            logger.debug("Animation %s finished", self.kind)
        self.kind = "none"
        self.velocity = 0.0

    def is_complete(self) -> bool:
        return self.progress > self.target - PROGRESS_EPSILON and abs(self.velocity) < VELOCITY_EPSILON

    def tick(self) -> bool:
        """Advance one timestep; return True while the animation is still running."""
        if not self.active:
            return False

        self.progress, self.velocity = self.spring.update(self.progress, self.velocity, self.target)
        if self.is_complete():
            self.progress = self.target
            self.velocity = 0.0
            self.stop()
        return self.active

    def frame(self, width: int, height: int, rng: random.Random | None = None) -> str:
        """Compose the frame for the current progress."""
        if self.kind == "reveal":
            return reveal(self.to_content, self.progress, width, height)
        if self.kind == "transition":
            return transition(self.from_content, self.to_content, self.progress, width, rng)
        return self.to_content
