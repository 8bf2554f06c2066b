"""Streak tracking and day rollover for LifeQuest."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from lifequest.catalog import MISSED_DAY_DEBUFF_ID
from lifequest.models import GameState

MISSED_DAY_DISCIPLINE_PENALTY = 15
MAX_DISCIPLINE_PENALTY = 30


@dataclass
class RolloverResult:
    days_diff: int
    streak_before: int
    streak_after: int
    discipline_penalty: int
    expired_buffs: list[str]
    changed: bool


def _parse_date(d: str) -> date:
    """Parse a YYYY-MM-DD string to a date object."""
    return date.fromisoformat(d)


def days_between(last_active: str, today: date) -> int:
    """Whole calendar days from ``last_active`` to ``today``. Unparseable dates count as today."""
    try:
        last = _parse_date(last_active)
    except (TypeError, ValueError):
        return 0
    return (today - last).days


def missed_day_penalty(days_diff: int) -> int:
    """Discipline lost after a gap: 15 per missed day, capped at 30."""
    if days_diff <= 1:
        return 0
    return min(MISSED_DAY_DISCIPLINE_PENALTY * (days_diff - 1), MAX_DISCIPLINE_PENALTY)


def next_streak(streak: int, days_diff: int) -> int:
    """Consecutive day extends the streak, any gap resets it."""
    if days_diff == 1:
        return streak + 1
    if days_diff > 1:
        return 0
    return streak


def expire_buffs(state: GameState, today: date) -> list[str]:
    """Deactivate item buffs whose expiry date has passed. Returns their ids."""
    expired: list[str] = []
    for buff in state.buffs:
        if not buff.active or not buff.expires_on:
            continue
        try:
            expires = _parse_date(buff.expires_on)
        except ValueError:
            continue
        if expires < today:
            buff.active = False
            expired.append(buff.id)
    return expired


def apply_day_rollover(state: GameState, today: date) -> RolloverResult:
    """Advance ``state`` to ``today``.

    Rules:
    - Same day, or the clock moved backwards: nothing changes.
    - One day later: streak + 1, "missed" debuff cleared.
    - Gap of two or more days: streak resets to 0, "missed" debuff active,
      discipline drops by min(15 * (days - 1), 30), floored at 0.
    - current_day advances by the number of days elapsed.
    """
    days_diff = days_between(state.last_active_date, today)
    streak_before = state.streak

    if days_diff <= 0:
        return RolloverResult(
            days_diff=days_diff,
            streak_before=streak_before,
            streak_after=streak_before,
            discipline_penalty=0,
            expired_buffs=[],
            changed=False,
        )

    state.streak = next_streak(state.streak, days_diff)
    state.current_day += days_diff
    state.last_active_date = today.isoformat()

    missed = state.find_debuff(MISSED_DAY_DEBUFF_ID)
    if missed is not None:
        missed.active = days_diff > 1

    penalty = missed_day_penalty(days_diff)
    state.stats.discipline = max(0, state.stats.discipline - penalty)

    expired = expire_buffs(state, today)

    return RolloverResult(
        days_diff=days_diff,
        streak_before=streak_before,
        streak_after=state.streak,
        discipline_penalty=penalty,
        expired_buffs=expired,
        changed=True,
    )
