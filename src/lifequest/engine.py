"""Game engine: the single owner of a LifeQuest game state.

Every command works on a copy of the state and is committed only when it
succeeds, so a rejected command never leaves a partial change behind. On
commit the engine re-checks achievements, reports level-ups and writes the
snapshot to storage. Commands return a CommandResult carrying the events
to show the user.
"""

from __future__ import annotations

import copy
import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from lifequest import events as ev
from lifequest.achievements import evaluate_achievements
from lifequest.catalog import DEEP_FOCUS_BUFF_ID, get_shop_item
from lifequest.config import DEFAULT_STORAGE_KEY
from lifequest.db import Database
from lifequest.end_of_day import DAY_TITLES, can_complete_day, end_day, first_recorded_height
from lifequest.levels import xp_progress_in_level
from lifequest.models import (
    GOAL_TYPES,
    QUEST_TYPES,
    SPORT_TYPES,
    STAT_NAMES,
    STUDY_TYPES,
    BodyMetrics,
    Buff,
    DailyReward,
    ExamResult,
    GameState,
    Goal,
    Quest,
    SportEntry,
    Stats,
    StudyEntry,
)
from lifequest.reports import (
    build_season_record,
    exam_progress,
    study_minutes_for_period,
    weekly_stats_average,
)
from lifequest.rewards import add_to_inventory, can_claim_today, claim_daily_reward, get_today_reward
from lifequest.state import SaveFormatError, dump_state, initial_state, load_state, parse_state
from lifequest.streaks import apply_day_rollover
from lifequest.xp import (
    GOAL_STAT_REWARD,
    award_xp,
    exam_xp,
    goal_xp,
    is_deep_focus_session,
    study_stat_deltas,
    study_xp,
)

GOAL_DEADLINE_DAYS: dict[str, int] = {"daily": 0, "weekly": 7, "monthly": 30}


@dataclass
class CommandResult:
    ok: bool
    reason: str | None = None
    events: list[ev.Event] = field(default_factory=list)
    value: Any = None


def _fail(reason: str) -> CommandResult:
    return CommandResult(ok=False, reason=reason)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _valid_rating(value: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 5


class GameEngine:
    """Owns one GameState, applies commands to it and persists each commit.

    db: optional blob store; without one the engine keeps state in memory.
    clock: returns the current local datetime; inject a fixed one in tests.
    """

    def __init__(
        self,
        db: Database | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.db = db
        self.storage_key = storage_key
        self._clock = clock or _local_now
        blob = db.get_blob(storage_key) if db is not None else None
        self.state: GameState = load_state(blob, self.today(), self.now_iso())
        self._started = False

    # ── clock ────────────────────────────────────────────────────────────

    def now(self) -> datetime:
        return self._clock()

    def now_iso(self) -> str:
        return self.now().isoformat()

    def today(self) -> date:
        return self.now().date()

    def today_str(self) -> str:
        return self.today().isoformat()

    # ── commit pipeline ──────────────────────────────────────────────────

    def _save(self) -> None:
        if self.db is not None:
            self.db.set_blob(self.storage_key, dump_state(self.state))

    def _commit(self, draft: GameState, result: CommandResult) -> None:
        previous_level = self.state.level
        for achievement in evaluate_achievements(draft, self.now_iso()):
            result.events.append(ev.achievement_unlocked(achievement.title))
        if draft.level > previous_level:
            result.events.append(ev.level_up(draft.level))
        self.state = draft
        self._save()

    def _run(self, apply: Callable[[GameState], CommandResult]) -> CommandResult:
        draft = copy.deepcopy(self.state)
        result = apply(draft)
        if result.ok:
            self._commit(draft, result)
        return result

    # ── session ──────────────────────────────────────────────────────────

    def start(self) -> CommandResult:
        """Roll the calendar forward to today. Run once per session."""
        def apply(state: GameState) -> CommandResult:
            return CommandResult(ok=True, value=apply_day_rollover(state, self.today()))

        result = self._run(apply)
        if not self._started:
            result.events.insert(0, ev.greeting())
            self._started = True
        return result

    # ── study ────────────────────────────────────────────────────────────

    def log_study(
        self,
        subject: str,
        study_type: str,
        hours: int,
        minutes: int,
        quality: int,
        focus: int,
        efficiency: int,
        comment: str | None = None,
    ) -> CommandResult:
        """Record a study session and award its XP and stat changes."""
        if not subject or not subject.strip():
            return _fail("blank_subject")
        if study_type not in STUDY_TYPES:
            return _fail("invalid_type")
        if hours < 0 or minutes < 0 or (hours == 0 and minutes == 0):
            return _fail("invalid_duration")
        if not all(_valid_rating(r) for r in (quality, focus, efficiency)):
            return _fail("invalid_rating")

        total_minutes = hours * 60 + minutes
        entry = StudyEntry(
            id=str(uuid.uuid4()),
            date=self.today_str(),
            subject=subject.strip(),
            type=study_type,
            hours=hours,
            minutes=minutes,
            quality=quality,
            focus=focus,
            efficiency=efficiency,
            xp_earned=study_xp(total_minutes, quality, study_type),
            comment=comment,
        )

        def apply(state: GameState) -> CommandResult:
            state.study_entries.append(entry)
            award_xp(state, entry.xp_earned)
            state.stats.apply(study_stat_deltas(total_minutes, quality, focus, efficiency))
            if is_deep_focus_session(total_minutes, focus):
                buff = state.find_buff(DEEP_FOCUS_BUFF_ID)
                if buff is not None:
                    buff.active = True
            return CommandResult(ok=True, value=entry)

        return self._run(apply)

    # ── goals ────────────────────────────────────────────────────────────

    def add_goal(
        self, title: str, goal_type: str, planned_hours: float, deadline: str | None = None
    ) -> CommandResult:
        if not title or not title.strip():
            return _fail("blank_title")
        if goal_type not in GOAL_TYPES:
            return _fail("invalid_type")
        if planned_hours <= 0:
            return _fail("invalid_hours")

        if deadline is None:
            deadline = (self.today() + timedelta(days=GOAL_DEADLINE_DAYS[goal_type])).isoformat()
        goal = Goal(
            id=str(uuid.uuid4()),
            title=title.strip(),
            type=goal_type,
            planned_hours=planned_hours,
            deadline=deadline,
            created_at=self.now_iso(),
        )

        def apply(state: GameState) -> CommandResult:
            state.goals.append(goal)
            return CommandResult(ok=True, value=goal)

        return self._run(apply)

    def update_goal(
        self,
        goal_id: str,
        actual_hours: float | None = None,
        planned_hours: float | None = None,
        completed: bool | None = None,
    ) -> CommandResult:
        """Update a goal's hours or mark it complete.

        Completed goals are frozen. The completion reward is paid on the
        false -> true transition only.
        """
        if actual_hours is not None and actual_hours < 0:
            return _fail("invalid_hours")
        if planned_hours is not None and planned_hours <= 0:
            return _fail("invalid_hours")

        def apply(state: GameState) -> CommandResult:
            goal = state.find_goal(goal_id)
            if goal is None:
                return _fail("not_found")
            if goal.completed:
                return _fail("already_completed")

            if actual_hours is not None:
                goal.actual_hours = actual_hours
            if planned_hours is not None:
                goal.planned_hours = planned_hours

            result = CommandResult(ok=True, value=goal)
            if completed:
                goal.completed = True
                reward = goal_xp(goal.type)
                award_xp(state, reward)
                state.stats.apply(GOAL_STAT_REWARD)
                result.events.append(ev.goal_complete(goal.title, "Goal achieved!", reward))
            return result

        return self._run(apply)

    # ── quests ───────────────────────────────────────────────────────────

    def add_quest(
        self,
        title: str,
        quest_type: str,
        xp_reward: int,
        stat_effects: dict[str, int] | None = None,
        description: str = "",
        deadline: str | None = None,
    ) -> CommandResult:
        if not title or not title.strip():
            return _fail("blank_title")
        if quest_type not in QUEST_TYPES:
            return _fail("invalid_type")
        if xp_reward < 0:
            return _fail("invalid_reward")
        effects = dict(stat_effects or {})
        if any(name not in STAT_NAMES for name in effects):
            return _fail("invalid_stat")

        quest = Quest(
            id=str(uuid.uuid4()),
            title=title.strip(),
            description=description,
            type=quest_type,
            xp_reward=xp_reward,
            stat_effects=effects,
            created_at=self.now_iso(),
            deadline=deadline,
        )

        def apply(state: GameState) -> CommandResult:
            state.quests.append(quest)
            return CommandResult(ok=True, value=quest)

        return self._run(apply)

    def complete_quest(self, quest_id: str) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            quest = state.find_quest(quest_id)
            if quest is None:
                return _fail("not_found")
            if quest.completed:
                return _fail("already_completed")
            quest.completed = True
            award_xp(state, quest.xp_reward)
            state.stats.apply(quest.stat_effects)
            return CommandResult(
                ok=True,
                value=quest,
                events=[ev.quest_complete(quest.title, "Quest completed!", quest.xp_reward)],
            )

        return self._run(apply)

    def delete_quest(self, quest_id: str) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            quest = state.find_quest(quest_id)
            if quest is None:
                return _fail("not_found")
            state.quests.remove(quest)
            return CommandResult(ok=True, value=quest)

        return self._run(apply)

    # ── buffs, debuffs, iron mode ────────────────────────────────────────

    def toggle_buff(self, buff_id: str) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            buff = state.find_buff(buff_id)
            if buff is None:
                return _fail("not_found")
            buff.active = not buff.active
            return CommandResult(ok=True, value=buff)

        return self._run(apply)

    def toggle_debuff(self, debuff_id: str) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            debuff = state.find_debuff(debuff_id)
            if debuff is None:
                return _fail("not_found")
            debuff.active = not debuff.active
            return CommandResult(ok=True, value=debuff)

        return self._run(apply)

    def toggle_iron_mode(self) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            state.iron_mode = not state.iron_mode
            return CommandResult(ok=True, value=state.iron_mode)

        return self._run(apply)

    # ── shop ─────────────────────────────────────────────────────────────

    def buy_item(self, item_id: str) -> CommandResult:
        item = get_shop_item(item_id)
        if item is None:
            return _fail("unknown_item")

        def apply(state: GameState) -> CommandResult:
            if state.gold < item.price:
                return _fail("insufficient_gold")
            state.gold -= item.price
            return CommandResult(ok=True, value=add_to_inventory(state, item.id, self.now_iso()))

        return self._run(apply)

    def use_item(self, item_id: str) -> CommandResult:
        """Consume one owned item: stat boosts, plus a fresh buff for XP multipliers."""
        item = get_shop_item(item_id)
        if item is None:
            return _fail("unknown_item")
        if item.buff_effect is None:
            return _fail("not_usable")
        effect = item.buff_effect

        def apply(state: GameState) -> CommandResult:
            owned = state.find_inventory(item_id)
            if owned is None or owned.quantity <= 0:
                return _fail("not_owned")

            state.stats.apply(effect.stat_boost)
            buff = None
            if effect.multiplier and effect.multiplier != 1:
                expires_on = None
                if effect.duration > 0:
                    expires_on = (self.today() + timedelta(days=effect.duration - 1)).isoformat()
                buff = Buff(
                    id=f"item_{item.id}_{uuid.uuid4().hex[:8]}",
                    name=item.name,
                    icon=item.icon,
                    effect=item.effect,
                    multiplier=effect.multiplier,
                    active=True,
                    expires_on=expires_on,
                )
                state.buffs.append(buff)

            owned.quantity -= 1
            state.inventory = [i for i in state.inventory if i.quantity > 0]
            return CommandResult(ok=True, value=buff)

        return self._run(apply)

    # ── daily rewards ────────────────────────────────────────────────────

    def today_reward(self) -> DailyReward | None:
        return get_today_reward(self.state)

    def can_claim_reward_today(self) -> bool:
        return can_claim_today(self.state, self.today_str())

    def claim_daily_reward(self) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            claim = claim_daily_reward(state, self.today_str(), self.now_iso())
            if not claim.ok:
                return _fail(claim.reason or "not_claimable")
            return CommandResult(
                ok=True, value=claim.reward, events=[ev.daily_reward(claim.reward.xp_reward)]
            )

        return self._run(apply)

    # ── exams, sport, body ───────────────────────────────────────────────

    def add_exam_result(
        self,
        subject: str,
        score: float,
        max_score: float,
        test_name: str,
        notes: str | None = None,
    ) -> CommandResult:
        if not subject or not subject.strip():
            return _fail("blank_subject")
        if max_score <= 0 or score < 0 or score > max_score:
            return _fail("invalid_score")

        result_entry = ExamResult(
            id=str(uuid.uuid4()),
            subject=subject.strip(),
            date=self.today_str(),
            score=score,
            max_score=max_score,
            test_name=test_name,
            notes=notes,
        )

        def apply(state: GameState) -> CommandResult:
            state.exam_results.append(result_entry)
            award_xp(state, exam_xp(score, max_score))
            return CommandResult(ok=True, value=result_entry)

        return self._run(apply)

    def add_sport_entry(
        self,
        sport_type: str,
        duration: int,
        intensity: int,
        reps: int | None = None,
        distance: float | None = None,
        notes: str | None = None,
    ) -> CommandResult:
        if sport_type not in SPORT_TYPES:
            return _fail("invalid_type")
        if duration <= 0:
            return _fail("invalid_duration")
        if not _valid_rating(intensity):
            return _fail("invalid_rating")

        entry = SportEntry(
            id=str(uuid.uuid4()),
            date=self.today_str(),
            type=sport_type,
            duration=duration,
            intensity=intensity,
            reps=reps,
            distance=distance,
            notes=notes,
            created_at=self.now_iso(),
        )

        def apply(state: GameState) -> CommandResult:
            state.sport_entries.append(entry)
            return CommandResult(ok=True, value=entry)

        return self._run(apply)

    def log_body_metrics(self, weight: float, height: float | None = None) -> CommandResult:
        if weight <= 0 or (height is not None and height <= 0):
            return _fail("invalid_measurement")

        def apply(state: GameState) -> CommandResult:
            metrics = BodyMetrics(
                id=str(uuid.uuid4()),
                date=self.today_str(),
                weight=weight,
                height=height if height is not None else first_recorded_height(state),
                created_at=self.now_iso(),
            )
            state.body_metrics.append(metrics)
            return CommandResult(ok=True, value=metrics)

        return self._run(apply)

    # ── end of day ───────────────────────────────────────────────────────

    def can_complete_day(self) -> bool:
        return can_complete_day(self.state, self.today_str())

    def end_day(self, impressions: str, daily_state: Stats, weight: float | None = None) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            outcome = end_day(state, impressions, daily_state, self.today_str(), self.now_iso(), weight)
            if not outcome.ok:
                return _fail(outcome.reason or "not_completable")
            title = DAY_TITLES[outcome.day_quality]
            message = f"Day {outcome.record.day_number} is in the books."
            return CommandResult(
                ok=True,
                value=outcome.record,
                events=[ev.day_end(title, message, outcome.day_quality)],
            )

        return self._run(apply)

    # ── season and streak ────────────────────────────────────────────────

    def start_new_season(self) -> CommandResult:
        """Archive the season and start over, keeping achievements and history."""
        record = build_season_record(self.state, self.today_str())
        fresh = initial_state(self.today(), self.now_iso())
        fresh.achievements = copy.deepcopy(self.state.achievements)
        fresh.season_history = [*copy.deepcopy(self.state.season_history), record]
        result = CommandResult(ok=True, value=record)
        self._commit(fresh, result)
        return result

    def break_streak(self) -> CommandResult:
        def apply(state: GameState) -> CommandResult:
            state.streak = 0
            return CommandResult(ok=True)

        return self._run(apply)

    # ── save files ───────────────────────────────────────────────────────

    def export_save(self) -> str:
        return dump_state(self.state, indent=2)

    def export_filename(self) -> str:
        return f"lifequest-save-{self.today_str()}.json"

    def import_save(self, text: str) -> CommandResult:
        """Replace the whole state with a saved snapshot. All or nothing."""
        try:
            imported = parse_state(json.loads(text), self.today(), self.now_iso())
        except (json.JSONDecodeError, SaveFormatError, TypeError):
            return _fail("invalid_save")
        self.state = imported
        self._save()
        return CommandResult(ok=True, value=imported)

    def reset_all(self) -> CommandResult:
        self.state = initial_state(self.today(), self.now_iso())
        if self.db is not None:
            self.db.delete_blob(self.storage_key)
        return CommandResult(ok=True)

    # ── queries ──────────────────────────────────────────────────────────

    def xp_progress(self) -> tuple[int, int]:
        return xp_progress_in_level(self.state.xp)

    def study_minutes(self, period: str = "today") -> int:
        return study_minutes_for_period(self.state, period, self.today())

    def weekly_stats_average(self) -> Stats:
        return weekly_stats_average(self.state, self.today())

    def exam_progress(self) -> dict[str, dict]:
        return exam_progress(self.state)
