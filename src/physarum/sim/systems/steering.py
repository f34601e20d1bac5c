from __future__ import annotations

from enum import IntEnum
from typing import Optional

from ..core.rng import DeterministicRng


class Turn(IntEnum):
    RIGHT = -1
    STRAIGHT = 0
    LEFT = 1


def compare(a: Optional[float], b: Optional[float]) -> Optional[int]:
    """Three-way ordering of two sensor readings; ``None`` when either is absent."""
    if a is None or b is None:
        return None
    if a > b:
        return 1
    if a < b:
        return -1
    return 0


def decide_turn(
    left: Optional[float],
    center: Optional[float],
    right: Optional[float],
    tie_break: str,
    rng: DeterministicRng,
) -> Turn:
    """Pick a turn from one (left, center, right) sensor triple.

    Readings strictly increasing toward the left sensor turn left, and
    strictly increasing toward the right sensor turn right. A center peak goes straight. A center
    trough goes straight under ``"straight"``. Under ``"random"`` it turns
    LEFT or RIGHT with equal odds; STRAIGHT is never drawn. Ties and off-grid
    readings go straight.
    """
    lc = compare(left, center)
    cr = compare(center, right)
    if lc is None or cr is None:
        return Turn.STRAIGHT
    if lc > 0 and cr > 0:
        return Turn.LEFT
    if lc < 0 and cr < 0:
        return Turn.RIGHT
    if lc > 0 and cr < 0 and tie_break == "random":
        return rng.sample_choice((Turn.LEFT, Turn.RIGHT))
    return Turn.STRAIGHT
