"""Data model for the LifeQuest game state.

Every entity lives by value inside :class:`GameState`. Persisted snapshots
use the snake_case field names below; ``from_dict`` keeps only the keys a
dataclass knows about, so older or newer snapshots still load.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any

STAT_NAMES: tuple[str, ...] = (
    "focus",
    "discipline",
    "energy",
    "motivation",
    "time_management",
    "study",
    "emotional_stability",
    "sport",
)

STAT_MIN = 0
STAT_MAX = 100
DEFAULT_STAT_VALUE = 50

STUDY_TYPES = ("theory", "practice")
GOAL_TYPES = ("daily", "weekly", "monthly")
QUEST_TYPES = ("daily", "weekly", "longterm")
SPORT_TYPES = ("running", "gym", "pushups", "pullups", "cardio", "stretching", "yoga", "other")


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class ItemCategory(str, Enum):
    BUFF = "buff"
    GEAR = "gear"
    COSMETIC = "cosmetic"
    CONSUMABLE = "consumable"


def clamp_stat(value: float) -> int:
    """Clamp a stat value into [0, 100]."""
    return int(max(STAT_MIN, min(STAT_MAX, value)))


def _known(cls: type, data: dict) -> dict:
    """Filter ``data`` down to the fields declared on dataclass ``cls``."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Stats:
    focus: int = DEFAULT_STAT_VALUE
    discipline: int = DEFAULT_STAT_VALUE
    energy: int = DEFAULT_STAT_VALUE
    motivation: int = DEFAULT_STAT_VALUE
    time_management: int = DEFAULT_STAT_VALUE
    study: int = DEFAULT_STAT_VALUE
    emotional_stability: int = DEFAULT_STAT_VALUE
    sport: int = DEFAULT_STAT_VALUE

    def apply(self, changes: dict[str, float]) -> None:
        """Add partial deltas, clamping every touched channel to [0, 100]."""
        for name, delta in changes.items():
            if name not in STAT_NAMES:
                continue
            setattr(self, name, clamp_stat(getattr(self, name) + delta))

    def values(self) -> list[int]:
        return [getattr(self, name) for name in STAT_NAMES]

    def average(self) -> float:
        return sum(self.values()) / len(STAT_NAMES)

    @classmethod
    def from_dict(cls, data: dict) -> Stats:
        """Build Stats, filling missing channels with 50 and clamping the rest."""
        return cls(**{name: clamp_stat(float(data.get(name, DEFAULT_STAT_VALUE))) for name in STAT_NAMES})


@dataclass
class StudyEntry:
    id: str
    date: str  # YYYY-MM-DD
    subject: str
    type: str  # theory | practice
    hours: int
    minutes: int
    quality: int
    focus: int
    efficiency: int
    xp_earned: int
    comment: str | None = None

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    @classmethod
    def from_dict(cls, data: dict) -> StudyEntry:
        return cls(**_known(cls, data))


@dataclass
class Goal:
    id: str
    title: str
    type: str  # daily | weekly | monthly
    planned_hours: float
    deadline: str
    created_at: str
    actual_hours: float = 0.0
    completed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> Goal:
        return cls(**_known(cls, data))


@dataclass
class Quest:
    id: str
    title: str
    description: str
    type: str  # daily | weekly | longterm
    xp_reward: int
    stat_effects: dict[str, int] = field(default_factory=dict)
    completed: bool = False
    created_at: str = ""
    deadline: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Quest:
        return cls(**_known(cls, data))


@dataclass
class Buff:
    id: str
    name: str
    icon: str
    effect: str
    multiplier: float
    active: bool = False
    expires_on: str | None = None  # YYYY-MM-DD, item buffs only

    @classmethod
    def from_dict(cls, data: dict) -> Buff:
        return cls(**_known(cls, data))


@dataclass
class Debuff:
    id: str
    name: str
    icon: str
    effect: str
    penalty: float  # fraction < 1; 0 means no XP effect
    active: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> Debuff:
        return cls(**_known(cls, data))


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    xp_reward: int
    unlocked: bool = False
    unlocked_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Achievement:
        return cls(**_known(cls, data))


@dataclass
class SeasonRecord:
    id: str
    start_date: str
    end_date: str
    total_days: int
    max_streak: int
    total_xp: int
    final_level: int
    total_study_hours: float

    @classmethod
    def from_dict(cls, data: dict) -> SeasonRecord:
        return cls(**_known(cls, data))


@dataclass(frozen=True)
class BuffEffect:
    stat_boost: dict[str, int]
    duration: int  # days; 0 means instant
    multiplier: float | None = None


@dataclass(frozen=True)
class ShopItem:
    """Static catalog entry. Never part of the mutable state."""

    id: str
    name: str
    description: str
    icon: str
    price: int
    rarity: Rarity
    effect: str
    category: ItemCategory
    buff_effect: BuffEffect | None = None


@dataclass
class InventoryItem:
    item_id: str
    quantity: int
    acquired_at: str

    @classmethod
    def from_dict(cls, data: dict) -> InventoryItem:
        return cls(**_known(cls, data))


@dataclass
class DailyReward:
    id: str
    day_number: int
    gold_reward: int
    xp_reward: int
    item_reward: str | None = None
    claimed_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> DailyReward:
        return cls(**_known(cls, data))


@dataclass
class ExamResult:
    id: str
    subject: str
    date: str
    score: float
    max_score: float
    test_name: str
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> ExamResult:
        return cls(**_known(cls, data))


@dataclass
class SportEntry:
    id: str
    date: str
    type: str
    duration: int  # minutes
    intensity: int  # 1-5
    created_at: str
    reps: int | None = None
    distance: float | None = None  # km
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> SportEntry:
        return cls(**_known(cls, data))


@dataclass
class BodyMetrics:
    id: str
    date: str
    weight: float  # kg
    height: float  # cm
    created_at: str

    @classmethod
    def from_dict(cls, data: dict) -> BodyMetrics:
        return cls(**_known(cls, data))


@dataclass
class DayRecord:
    id: str
    date: str
    day_number: int
    stats_summary: Stats
    previous_stats: Stats
    daily_state: Stats
    impressions: str
    study_minutes: int
    total_study_hours: float
    completed_quests: int
    completed_goals: int
    created_at: str
    weight: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> DayRecord:
        values = _known(cls, data)
        for key in ("stats_summary", "previous_stats", "daily_state"):
            values[key] = Stats.from_dict(values.get(key) or {})
        return cls(**values)


@dataclass
class GameState:
    current_day: int
    streak: int
    season_start_date: str
    last_active_date: str
    xp: int = 0
    level: int = 1
    iron_mode: bool = False
    gold: int = 0
    stats: Stats = field(default_factory=Stats)
    study_entries: list[StudyEntry] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    quests: list[Quest] = field(default_factory=list)
    buffs: list[Buff] = field(default_factory=list)
    debuffs: list[Debuff] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)
    season_history: list[SeasonRecord] = field(default_factory=list)
    inventory: list[InventoryItem] = field(default_factory=list)
    daily_rewards: list[DailyReward] = field(default_factory=list)
    exam_results: list[ExamResult] = field(default_factory=list)
    day_records: list[DayRecord] = field(default_factory=list)
    sport_entries: list[SportEntry] = field(default_factory=list)
    body_metrics: list[BodyMetrics] = field(default_factory=list)
    last_reward_claim_date: str | None = None
    last_day_completed_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def find_buff(self, buff_id: str) -> Buff | None:
        return next((b for b in self.buffs if b.id == buff_id), None)

    def find_debuff(self, debuff_id: str) -> Debuff | None:
        return next((d for d in self.debuffs if d.id == debuff_id), None)

    def find_goal(self, goal_id: str) -> Goal | None:
        return next((g for g in self.goals if g.id == goal_id), None)

    def find_quest(self, quest_id: str) -> Quest | None:
        return next((q for q in self.quests if q.id == quest_id), None)

    def find_inventory(self, item_id: str) -> InventoryItem | None:
        return next((i for i in self.inventory if i.item_id == item_id), None)
