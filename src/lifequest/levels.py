"""Level progression calculation. Pure functions, no side effects."""

import math

XP_PER_LEVEL_UNIT = 100


def level_from_xp(total_xp: int) -> int:
    """Given total XP, return current level. Formula: floor(sqrt(xp / 100)) + 1."""
    if total_xp <= 0:
        return 1
    return math.isqrt(int(total_xp) // XP_PER_LEVEL_UNIT) + 1


def xp_floor(level: int) -> int:
    """Total XP required to have reached this level: (L - 1)^2 * 100."""
    if level <= 1:
        return 0
    return (level - 1) ** 2 * XP_PER_LEVEL_UNIT


def xp_ceiling(level: int) -> int:
    """Total XP required to reach the level after this one: L^2 * 100."""
    if level <= 0:
        return 0
    return level ** 2 * XP_PER_LEVEL_UNIT


def xp_progress_in_level(total_xp: int) -> tuple[int, int]:
    """Return (current_xp_in_level, xp_span_of_level)."""
    level = level_from_xp(total_xp)
    floor = xp_floor(level)
    return (max(0, total_xp - floor), xp_ceiling(level) - floor)
