"""Achievement rules and unlocking for LifeQuest."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from lifequest.models import Achievement, GameState
from lifequest.xp import award_xp


@dataclass
class AchievementRule:
    id: str
    target: float
    check_field: str


@dataclass
class AchievementStatus:
    rule: AchievementRule
    progress: float  # 0.0 to 1.0
    unlocked: bool


ACHIEVEMENT_RULES: list[AchievementRule] = [
    AchievementRule(id="first_day", target=1, check_field="current_day"),
    AchievementRule(id="week_streak", target=7, check_field="streak"),
    AchievementRule(id="month_streak", target=30, check_field="streak"),
    AchievementRule(id="study_10h", target=10, check_field="total_study_hours"),
    AchievementRule(id="study_50h", target=50, check_field="total_study_hours"),
    AchievementRule(id="study_100h", target=100, check_field="total_study_hours"),
    AchievementRule(id="level_5", target=5, check_field="level"),
    AchievementRule(id="level_10", target=10, check_field="level"),
    AchievementRule(id="level_25", target=25, check_field="level"),
    AchievementRule(id="quest_10", target=10, check_field="completed_quests"),
    AchievementRule(id="iron_week", target=7, check_field="iron_mode_streak"),
    AchievementRule(id="all_stats_70", target=70, check_field="min_stat"),
]


def build_achievement_stats(state: GameState) -> dict:
    """Build the metric dict the rules check against.

    - current_day, streak, level: straight from the state
    - total_study_hours: sum of logged study time
    - completed_quests: quests with completed=True
    - iron_mode_streak: streak while iron mode is on, else 0
    - min_stat: lowest of the 8 stat channels
    """
    total_minutes = sum(e.hours * 60 + e.minutes for e in state.study_entries)
    return {
        "current_day": state.current_day,
        "streak": state.streak,
        "level": state.level,
        "total_study_hours": total_minutes / 60,
        "completed_quests": sum(1 for q in state.quests if q.completed),
        "iron_mode_streak": state.streak if state.iron_mode else 0,
        "min_stat": min(state.stats.values()),
    }


def check_achievements(stats: dict) -> list[AchievementStatus]:
    """Check every rule against ``stats``; progress is min(current/target, 1.0)."""
    results: list[AchievementStatus] = []
    for rule in ACHIEVEMENT_RULES:
        current_value = stats.get(rule.check_field, 0)
        progress = min(current_value / rule.target, 1.0) if rule.target > 0 else 0.0
        results.append(AchievementStatus(rule=rule, progress=max(progress, 0.0), unlocked=progress >= 1.0))
    return results


def get_closest_achievements(
    state: GameState, statuses: list[AchievementStatus], n: int = 3
) -> list[tuple[Achievement, AchievementStatus]]:
    """Return the N locked achievements closest to being unlocked."""
    by_id = {s.rule.id: s for s in statuses}
    in_progress = [
        (a, by_id[a.id]) for a in state.achievements if not a.unlocked and a.id in by_id
    ]
    in_progress.sort(key=lambda pair: pair[1].progress, reverse=True)
    return in_progress[:n]


def evaluate_achievements(state: GameState, unlocked_at: str) -> list[Achievement]:
    """Unlock every locked achievement whose rule now holds.

    Already-unlocked achievements are skipped. The XP rewards of everything
    unlocked in this pass are summed and awarded once, so buff multipliers
    apply to the total rather than per achievement.
    """
    statuses = {s.rule.id: s for s in check_achievements(build_achievement_stats(state))}
    newly_unlocked: list[Achievement] = []
    xp_gained = 0
    for achievement in state.achievements:
        if achievement.unlocked:
            continue
        status = statuses.get(achievement.id)
        if status is None or not status.unlocked:
            continue
        achievement.unlocked = True
        achievement.unlocked_at = unlocked_at
        xp_gained += achievement.xp_reward
        newly_unlocked.append(achievement)

    if xp_gained > 0:
        award_xp(state, xp_gained)
    return newly_unlocked


def achievement_progress(state: GameState) -> list[dict]:
    """Every achievement as a dict plus its progress; unlocked ones report 1.0."""
    statuses = {s.rule.id: s for s in check_achievements(build_achievement_stats(state))}
    rows = []
    for achievement in state.achievements:
        status = statuses.get(achievement.id)
        progress = 1.0 if achievement.unlocked else (status.progress if status else 0.0)
        rows.append({**asdict(achievement), "progress": progress})
    return rows
