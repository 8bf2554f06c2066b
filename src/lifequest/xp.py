"""XP calculation engine for LifeQuest.

Pure functions that turn logged activity into XP, plus the award pipeline
that runs an amount through every active buff and debuff before adding it
to the state. Rounding is half-up throughout.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from lifequest.levels import level_from_xp
from lifequest.models import Buff, Debuff, GameState

# Study
XP_PER_STUDY_MINUTE = 2
QUALITY_BASELINE = 3
PRACTICE_BONUS = 0.25
MAX_STUDY_STAT_GAIN = 5
MINUTES_PER_STUDY_POINT = 30

# Deep focus session
DEEP_FOCUS_MINUTES = 120
DEEP_FOCUS_MIN_RATING = 4

# Goals
GOAL_XP: dict[str, int] = {
    "daily": 50,
    "weekly": 200,
    "monthly": 500,
}
GOAL_STAT_REWARD: dict[str, int] = {"motivation": 3, "discipline": 2}

# Exams
EXAM_XP_SCALE = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def resolve_xp(amount: float, buffs: Iterable[Buff], debuffs: Iterable[Debuff]) -> int:
    """Apply every active buff multiplier and debuff penalty to ``amount``.

    Debuffs with a zero penalty carry no XP effect and are skipped.
    """
    final = amount
    for buff in buffs:
        if buff.active:
            final *= buff.multiplier
    for debuff in debuffs:
        if debuff.active and debuff.penalty > 0:
            final *= debuff.penalty
    return round_half_up(final)


def award_xp(state: GameState, amount: float) -> int:
    """Run ``amount`` through the effect pipeline and add it to ``state``.

    ``xp`` and ``level`` are updated together. XP never drops below zero.
    Returns the XP actually granted.
    """
    gained = resolve_xp(amount, state.buffs, state.debuffs)
    new_xp = max(0, state.xp + gained)
    granted = new_xp - state.xp
    state.xp = new_xp
    state.level = level_from_xp(new_xp)
    return granted


def study_xp(total_minutes: int, quality: int, study_type: str) -> int:
    """XP for a study session: round(minutes * 2 * quality/3), practice adds 25%."""
    base = round_half_up(total_minutes * XP_PER_STUDY_MINUTE * (quality / QUALITY_BASELINE))
    bonus = round_half_up(base * PRACTICE_BONUS) if study_type == "practice" else 0
    return base + bonus


def study_stat_deltas(total_minutes: int, quality: int, focus: int, efficiency: int) -> dict[str, int]:
    """Stat changes from a study session. High ratings raise stats, low ones cost."""
    if quality > 3:
        discipline = round_half_up(quality / 2)
    else:
        discipline = -round_half_up((4 - quality) * 2)

    if efficiency > 3:
        stability = 2
    elif efficiency < 3:
        stability = -2
    else:
        stability = 0

    return {
        "study": min(MAX_STUDY_STAT_GAIN, round_half_up(total_minutes / MINUTES_PER_STUDY_POINT)),
        "focus": round_half_up((focus - 3) * 2),
        "discipline": discipline,
        "emotional_stability": stability,
    }


def is_deep_focus_session(total_minutes: int, focus: int) -> bool:
    return total_minutes >= DEEP_FOCUS_MINUTES and focus >= DEEP_FOCUS_MIN_RATING


def goal_xp(goal_type: str) -> int:
    """XP for completing a goal; unknown types pay the monthly rate."""
    return GOAL_XP.get(goal_type, GOAL_XP["monthly"])


def exam_xp(score: float, max_score: float) -> int:
    """XP for a practice test: round(100 * score / max_score)."""
    if max_score <= 0:
        return 0
    return round_half_up(EXAM_XP_SCALE * score / max_score)
