"""Database model exports."""

from .slot import WalkingSlot
from .walker import Walker

__all__ = [
    "Walker",
    "WalkingSlot",
]
