"""Notification events produced by engine commands.

Each command returns the events it caused; the caller decides how to show
them. Payloads are primitive values only.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

LEVEL_UP = "level-up"
GREETING = "greeting"
ACHIEVEMENT = "achievement"
DAILY_REWARD = "daily-reward"
QUEST_COMPLETE = "quest-complete"
GOAL_COMPLETE = "goal-complete"
DAY_END = "day-end"


@dataclass(frozen=True)
class Event:
    kind: str
    level: int | None = None
    achievement: str | None = None
    title: str | None = None
    message: str | None = None
    xp_reward: int | None = None
    day_quality: str | None = None  # poor | good | excellent

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def level_up(level: int) -> Event:
    return Event(kind=LEVEL_UP, level=level)


def greeting() -> Event:
    return Event(kind=GREETING)


def achievement_unlocked(name: str) -> Event:
    return Event(kind=ACHIEVEMENT, achievement=name)


def daily_reward(xp_reward: int) -> Event:
    return Event(kind=DAILY_REWARD, xp_reward=xp_reward)


def quest_complete(title: str, message: str, xp_reward: int) -> Event:
    return Event(kind=QUEST_COMPLETE, title=title, message=message, xp_reward=xp_reward)


def goal_complete(title: str, message: str, xp_reward: int) -> Event:
    return Event(kind=GOAL_COMPLETE, title=title, message=message, xp_reward=xp_reward)


def day_end(title: str, message: str, day_quality: str) -> Event:
    return Event(kind=DAY_END, title=title, message=message, day_quality=day_quality)
