"""Animation compositors and the spring that drives them."""

from orgcharm.animation.reveal import reveal
from orgcharm.animation.spring import Spring, default_spring, fps
from orgcharm.animation.state import AnimationKind, AnimationState
from orgcharm.animation.transition import transition

__all__ = [
    "AnimationKind",
    "AnimationState",
    "Spring",
    "default_spring",
    "fps",
    "reveal",
    "transition",
]
