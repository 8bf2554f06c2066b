"""Fresh game states, snapshot parsing and normalize-on-load.

``load_state`` is total: whatever blob comes out of storage, it returns a
usable GameState. ``parse_state`` is strict and raises SaveFormatError,
which the import path uses to stay all-or-nothing.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from lifequest.catalog import (
    STARTING_GOLD,
    daily_reward_schedule,
    default_achievements,
    default_buffs,
    default_debuffs,
    default_quests,
    default_stats,
)
from lifequest.levels import level_from_xp
from lifequest.models import (
    Achievement,
    BodyMetrics,
    Buff,
    DailyReward,
    DayRecord,
    Debuff,
    ExamResult,
    GameState,
    Goal,
    InventoryItem,
    Quest,
    SeasonRecord,
    SportEntry,
    Stats,
    StudyEntry,
)


class SaveFormatError(ValueError):
    """A snapshot could not be turned into a GameState."""


_LIST_FIELDS: dict[str, type] = {
    "study_entries": StudyEntry,
    "goals": Goal,
    "quests": Quest,
    "buffs": Buff,
    "debuffs": Debuff,
    "achievements": Achievement,
    "season_history": SeasonRecord,
    "inventory": InventoryItem,
    "daily_rewards": DailyReward,
    "exam_results": ExamResult,
    "day_records": DayRecord,
    "sport_entries": SportEntry,
    "body_metrics": BodyMetrics,
}


def _iso_date_or(value: Any, fallback: str) -> str:
    """``value`` when it is a YYYY-MM-DD date string, else ``fallback``."""
    if isinstance(value, str):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            pass
    return fallback


def initial_state(today: date, now_iso: str) -> GameState:
    """Brand-new game: level 1, day 1, streak 1, default catalogs."""
    today_str = today.isoformat()
    return GameState(
        current_day=1,
        streak=1,
        season_start_date=today_str,
        last_active_date=today_str,
        xp=0,
        level=1,
        iron_mode=False,
        gold=STARTING_GOLD,
        stats=default_stats(),
        quests=default_quests(now_iso, today_str),
        buffs=default_buffs(),
        debuffs=default_debuffs(),
        achievements=default_achievements(),
        daily_rewards=daily_reward_schedule(),
    )


def parse_state(data: Any, today: date, now_iso: str) -> GameState:
    """Turn a decoded snapshot into a GameState.

    Derived fields are never trusted: ``level`` is recomputed from ``xp``.
    Missing lists are filled (the reward schedule and default quests when
    absent or empty), and an unreadable ``last_active_date`` becomes today.
    Raises SaveFormatError when the shape is unusable.
    """
    if not isinstance(data, dict):
        raise SaveFormatError("snapshot must be a JSON object")

    fresh = initial_state(today, now_iso)
    try:
        lists: dict[str, list] = {}
        for name, cls in _LIST_FIELDS.items():
            raw_items = data.get(name)
            if raw_items is None:
                lists[name] = getattr(fresh, name)
                continue
            if not isinstance(raw_items, list):
                raise SaveFormatError(f"{name} must be a list")
            lists[name] = [cls.from_dict(item) for item in raw_items]

        if not lists["quests"]:
            lists["quests"] = fresh.quests
        if not lists["daily_rewards"]:
            lists["daily_rewards"] = fresh.daily_rewards

        xp = max(0, int(data.get("xp", 0) or 0))
        raw_stats = data.get("stats") or {}
        if not isinstance(raw_stats, dict):
            raise SaveFormatError("stats must be an object")

        return GameState(
            current_day=int(data.get("current_day", fresh.current_day)),
            streak=int(data.get("streak", fresh.streak)),
            season_start_date=str(data.get("season_start_date") or fresh.season_start_date),
            last_active_date=_iso_date_or(data.get("last_active_date"), fresh.last_active_date),
            xp=xp,
            level=level_from_xp(xp),
            iron_mode=bool(data.get("iron_mode", False)),
            gold=int(data.get("gold", fresh.gold)),
            stats=Stats.from_dict(raw_stats),
            last_reward_claim_date=data.get("last_reward_claim_date"),
            last_day_completed_date=data.get("last_day_completed_date"),
            **lists,
        )
    except SaveFormatError:
        raise
    except (TypeError, ValueError, AttributeError, KeyError, OverflowError) as exc:
        raise SaveFormatError(str(exc)) from exc


def load_state(blob: str | None, today: date, now_iso: str) -> GameState:
    """Decode a stored blob; anything unreadable falls back to a fresh state."""
    if not blob:
        return initial_state(today, now_iso)
    try:
        return parse_state(json.loads(blob), today, now_iso)
    except (json.JSONDecodeError, SaveFormatError):
        return initial_state(today, now_iso)


def dump_state(state: GameState, indent: int | None = None) -> str:
    """Serialize the full snapshot to JSON."""
    return json.dumps(state.to_dict(), indent=indent, ensure_ascii=False)
