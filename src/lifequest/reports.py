"""Read-only aggregates over the game state.

Pure functions: study time windows, weekly stat averages, exam progress
and the season summary archived on a season reset. No side effects.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta

from lifequest.catalog import SUBJECTS
from lifequest.models import STAT_NAMES, ExamResult, GameState, SeasonRecord, Stats
from lifequest.xp import round_half_up


def get_period_start(period: str, today: date) -> date:
    """Return the first day of a trailing window.

    period: "today" | "week" (last 7 days) | "month" (last 30 days)
    """
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return today - timedelta(days=30)
    return today


def study_minutes_on(state: GameState, day: str) -> int:
    """Minutes studied on one calendar date (YYYY-MM-DD)."""
    return sum(e.hours * 60 + e.minutes for e in state.study_entries if e.date == day)


def study_minutes_since(state: GameState, start: date) -> int:
    total = 0
    for entry in state.study_entries:
        try:
            entry_date = date.fromisoformat(entry.date)
        except ValueError:
            continue
        if entry_date >= start:
            total += entry.hours * 60 + entry.minutes
    return total


def study_minutes_for_period(state: GameState, period: str, today: date) -> int:
    if period == "today":
        return study_minutes_on(state, today.isoformat())
    return study_minutes_since(state, get_period_start(period, today))


def total_study_hours(state: GameState) -> float:
    """Lifetime study hours, rounded to one decimal."""
    minutes = sum(e.hours * 60 + e.minutes for e in state.study_entries)
    return round_half_up(minutes / 60 * 10) / 10


def weekly_stats_average(state: GameState, today: date) -> Stats:
    """Average of the end-of-day summaries from the last 7 days; defaults if none."""
    week_ago = today - timedelta(days=7)
    summaries: list[Stats] = []
    for record in state.day_records:
        try:
            record_date = date.fromisoformat(record.date)
        except ValueError:
            continue
        if week_ago <= record_date <= today:
            summaries.append(record.stats_summary)

    if not summaries:
        return Stats()

    return Stats(**{
        name: round_half_up(sum(getattr(s, name) for s in summaries) / len(summaries))
        for name in STAT_NAMES
    })


def exam_progress(state: GameState, subjects: list[str] | None = None) -> dict[str, dict]:
    """Per-subject practice test results with average and latest score."""
    progress: dict[str, dict] = {}
    for subject in subjects or SUBJECTS:
        results: list[ExamResult] = [r for r in state.exam_results if r.subject == subject]
        average = round_half_up(sum(r.score for r in results) / len(results)) if results else 0
        progress[subject] = {
            "subject": subject,
            "results": results,
            "average_score": average,
            "last_score": results[-1].score if results else 0,
        }
    return progress


def build_season_record(state: GameState, end_date: str) -> SeasonRecord:
    """Freeze the current season's totals into a SeasonRecord."""
    return SeasonRecord(
        id=str(uuid.uuid4()),
        start_date=state.season_start_date,
        end_date=end_date,
        total_days=state.current_day,
        max_streak=state.streak,
        total_xp=state.xp,
        final_level=state.level,
        total_study_hours=total_study_hours(state),
    )
