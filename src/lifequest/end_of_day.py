"""End-of-day summaries.

Averages how the user felt today against the running stats, archives an
immutable DayRecord and carries the averaged stats into tomorrow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

from lifequest.catalog import DEFAULT_HEIGHT_CM
from lifequest.models import STAT_NAMES, BodyMetrics, DayRecord, GameState, Stats, clamp_stat
from lifequest.reports import study_minutes_on
from lifequest.xp import round_half_up

POOR_DAY_THRESHOLD = 40
EXCELLENT_DAY_THRESHOLD = 70

DAY_TITLES: dict[str, str] = {
    "poor": "Rough day",
    "good": "Good day",
    "excellent": "Excellent day!",
}


@dataclass
class EndDayResult:
    ok: bool
    reason: str | None = None
    record: DayRecord | None = None
    day_quality: str | None = None


def can_complete_day(state: GameState, today: str) -> bool:
    return state.last_day_completed_date != today


def average_stats(current: Stats, daily_state: Stats) -> Stats:
    """Per channel: round((current + daily) / 2)."""
    return Stats(**{
        name: clamp_stat(round_half_up((getattr(current, name) + getattr(daily_state, name)) / 2))
        for name in STAT_NAMES
    })


def classify_day(daily_state: Stats) -> str:
    """poor below 40 average, excellent from 70, good in between."""
    avg = daily_state.average()
    if avg < POOR_DAY_THRESHOLD:
        return "poor"
    if avg >= EXCELLENT_DAY_THRESHOLD:
        return "excellent"
    return "good"


def end_day(
    state: GameState,
    impressions: str,
    daily_state: Stats,
    today: str,
    created_at: str,
    weight: float | None = None,
) -> EndDayResult:
    """Close out ``today``. At most once per calendar date; impressions are required."""
    if not can_complete_day(state, today):
        return EndDayResult(ok=False, reason="already_completed_today")
    if not impressions or not impressions.strip():
        return EndDayResult(ok=False, reason="blank_impressions")

    daily_state = Stats(**{name: clamp_stat(getattr(daily_state, name)) for name in STAT_NAMES})
    previous_stats = state.day_records[-1].stats_summary if state.day_records else Stats()
    averaged = average_stats(state.stats, daily_state)
    minutes = study_minutes_on(state, today)
    has_weight = weight is not None and weight > 0

    record = DayRecord(
        id=str(uuid.uuid4()),
        date=today,
        day_number=state.current_day,
        stats_summary=averaged,
        previous_stats=replace(previous_stats),
        daily_state=daily_state,
        impressions=impressions.strip(),
        weight=weight if has_weight else None,
        study_minutes=minutes,
        total_study_hours=round_half_up(minutes / 60 * 10) / 10,
        completed_quests=sum(1 for q in state.quests if q.type == "daily" and q.completed),
        completed_goals=sum(1 for g in state.goals if g.type == "daily" and g.completed),
        created_at=created_at,
    )

    state.stats = replace(averaged)
    state.day_records.append(record)
    state.last_day_completed_date = today

    if has_weight:
        state.body_metrics.append(
            BodyMetrics(
                id=str(uuid.uuid4()),
                date=today,
                weight=weight,
                height=first_recorded_height(state),
                created_at=created_at,
            )
        )

    return EndDayResult(ok=True, record=record, day_quality=classify_day(daily_state))


def first_recorded_height(state: GameState) -> float:
    """Height from the first body metrics entry, 170 cm when nothing is recorded."""
    if state.body_metrics and state.body_metrics[0].height:
        return state.body_metrics[0].height
    return DEFAULT_HEIGHT_CM
