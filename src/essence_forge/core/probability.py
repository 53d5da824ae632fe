import math

from essence_forge.models import RollMode

# ============================================================
# PROBABILITY
# ============================================================

DIE_FACES = 20


def chance_normal(dc: int, modifier: int) -> float:
    """
    Chance that one d20 plus modifier meets or beats dc.

    A required face of 1 or less always succeeds; one above 20 never does.
    """
    required = dc - modifier
    if required <= 1:
        return 1.0
    if required > DIE_FACES:
        return 0.0
    success_faces = DIE_FACES + 1 - math.ceil(required)
    return min(1.0, max(0.0, success_faces / DIE_FACES))


def chance_with_advantage(dc: int, modifier: int, mode: RollMode) -> float:
    """Check chance when two dice are drawn and resolved by mode."""
    base = chance_normal(dc, modifier)
    match RollMode(mode):
        case RollMode.ADVANTAGE:
            return 1 - (1 - base) ** 2      # At least one of two succeeds
        case RollMode.DISADVANTAGE:
            return base ** 2                # Both must succeed
        case _:
            return base


def pick_advantage(roll: int, other: int, mode: RollMode) -> int:
    """Select the effective die from two draws. Never re-rolls."""
    match RollMode(mode):
        case RollMode.ADVANTAGE:
            return max(roll, other)
        case RollMode.DISADVANTAGE:
            return min(roll, other)
        case _:
            return roll
