"""Static game catalogs: default buffs, debuffs, achievements, quests, shop and rewards.

The factories return fresh objects on every call so no two game states
ever share a mutable entry.
"""

from __future__ import annotations

from lifequest.models import (
    Achievement,
    Buff,
    BuffEffect,
    DailyReward,
    Debuff,
    ItemCategory,
    Quest,
    Rarity,
    ShopItem,
    Stats,
)

SUBJECTS: list[str] = ["Russian", "Mathematics", "Computer Science"]

STARTING_GOLD = 500
DEFAULT_HEIGHT_CM = 170

DEEP_FOCUS_BUFF_ID = "focus"
MISSED_DAY_DEBUFF_ID = "missed"

REWARD_CYCLE_LENGTH = 30
REWARD_ITEM_EVERY = 7
REWARD_ITEM_ID = "focus_potion"


def default_stats() -> Stats:
    return Stats()


def default_buffs() -> list[Buff]:
    return [
        Buff(id="streak", name="Day Streak", icon="\U0001f525",
             effect="+10% XP for every 7 streak days", multiplier=1.1),
        Buff(id=DEEP_FOCUS_BUFF_ID, name="Deep Focus", icon="\U0001f3af",
             effect="+25% XP for sessions over 2 hours", multiplier=1.25),
        Buff(id="sport", name="Active Lifestyle", icon="\U0001f4aa",
             effect="+15% energy", multiplier=1.15),
        Buff(id="morning", name="Early Bird", icon="\U0001f305",
             effect="+20% XP before 10:00", multiplier=1.2),
    ]


def default_debuffs() -> list[Debuff]:
    return [
        Debuff(id="procrastination", name="Procrastination", icon="\U0001f634",
               effect="-20% XP", penalty=0.8),
        Debuff(id="overload", name="Overload", icon="\U0001f92f",
               effect="-30% focus", penalty=0.7),
        Debuff(id=MISSED_DAY_DEBUFF_ID, name="Missed Day", icon="❌",
               effect="Streak reset", penalty=0),
        Debuff(id="burnout", name="Burnout", icon="\U0001f53b",
               effect="-25% to all stats", penalty=0.75),
    ]


def default_achievements() -> list[Achievement]:
    return [
        Achievement(id="first_day", title="First Step", description="Start your journey",
                    icon="\U0001f3ae", xp_reward=50),
        Achievement(id="week_streak", title="Week of Discipline", description="Reach a 7-day streak",
                    icon="\U0001f4c5", xp_reward=200),
        Achievement(id="month_streak", title="Month of Willpower", description="Reach a 30-day streak",
                    icon="\U0001f3c6", xp_reward=1000),
        Achievement(id="study_10h", title="Apprentice", description="Study for 10 hours",
                    icon="\U0001f4da", xp_reward=100),
        Achievement(id="study_50h", title="Student", description="Study for 50 hours",
                    icon="\U0001f393", xp_reward=500),
        Achievement(id="study_100h", title="Master of Knowledge", description="Study for 100 hours",
                    icon="\U0001f9e0", xp_reward=1500),
        Achievement(id="level_5", title="Novice+", description="Reach level 5",
                    icon="⬆️", xp_reward=150),
        Achievement(id="level_10", title="Experienced", description="Reach level 10",
                    icon="\U0001f31f", xp_reward=400),
        Achievement(id="level_25", title="Veteran", description="Reach level 25",
                    icon="\U0001f451", xp_reward=2000),
        Achievement(id="quest_10", title="Quest Hunter", description="Complete 10 quests",
                    icon="⚔️", xp_reward=300),
        Achievement(id="iron_week", title="Iron Will", description="Spend a week in Iron Mode",
                    icon="\U0001f6e1️", xp_reward=500),
        Achievement(id="all_stats_70", title="Balance", description="Every stat above 70",
                    icon="⚖️", xp_reward=800),
    ]


def default_quests(created_at: str, today: str) -> list[Quest]:
    """Seed quests. Daily quests are due today."""
    return [
        Quest(id="study_today", title="Study for 1 hour", description="Log one hour of study",
              type="daily", xp_reward=100, stat_effects={"study": 10, "focus": 5},
              created_at=created_at, deadline=today),
        Quest(id="focus_session", title="Deep Focus", description="A 2+ hour session with quality 4+",
              type="daily", xp_reward=150, stat_effects={"focus": 15, "study": 10},
              created_at=created_at, deadline=today),
        Quest(id="sport_today", title="Workout of the Day", description="Log a workout (30+ minutes)",
              type="daily", xp_reward=120, stat_effects={"sport": 15, "energy": 10},
              created_at=created_at, deadline=today),
        Quest(id="morning_routine", title="Morning Routine", description="Study before 9:00",
              type="daily", xp_reward=80, stat_effects={"discipline": 5, "motivation": 10},
              created_at=created_at, deadline=today),
        Quest(id="three_exams", title="Knowledge Triplet", description="Record practice tests in all 3 subjects",
              type="weekly", xp_reward=300, stat_effects={"study": 20, "focus": 15},
              created_at=created_at),
        Quest(id="consistent_week", title="Consistency", description="Study 7 days in a row",
              type="longterm", xp_reward=500, stat_effects={"discipline": 25, "motivation": 20},
              created_at=created_at),
        Quest(id="level_up", title="Level Up", description="Reach a new level",
              type="longterm", xp_reward=200, stat_effects={"motivation": 15},
              created_at=created_at),
        Quest(id="russian_progress", title="Master of Russian", description="Score 80+ in Russian",
              type="longterm", xp_reward=250, stat_effects={"study": 10},
              created_at=created_at),
        Quest(id="math_progress", title="Math Genius", description="Score 80+ in Mathematics",
              type="longterm", xp_reward=250, stat_effects={"study": 10},
              created_at=created_at),
        Quest(id="tech_progress", title="IT Specialist", description="Score 80+ in Computer Science",
              type="longterm", xp_reward=250, stat_effects={"study": 10},
              created_at=created_at),
    ]


SHOP_ITEMS: list[ShopItem] = [
    ShopItem(
        id="focus_potion", name="Focus Potion", description="Temporarily boosts concentration by 25%",
        icon="\U0001f9ea", price=100, rarity=Rarity.COMMON, effect="+25% focus for 1 day",
        category=ItemCategory.CONSUMABLE,
        buff_effect=BuffEffect(stat_boost={"focus": 25}, duration=1, multiplier=1.25),
    ),
    ShopItem(
        id="energy_drink", name="Energy Drink", description="Restores 20 points of energy",
        icon="⚡", price=80, rarity=Rarity.COMMON, effect="+20 energy",
        category=ItemCategory.CONSUMABLE,
        buff_effect=BuffEffect(stat_boost={"energy": 20}, duration=0),
    ),
    ShopItem(
        id="discipline_book", name="Book of Discipline", description="Raises discipline by 15 points",
        icon="\U0001f4d6", price=150, rarity=Rarity.RARE, effect="+15 discipline",
        category=ItemCategory.CONSUMABLE,
        buff_effect=BuffEffect(stat_boost={"discipline": 15}, duration=0),
    ),
    ShopItem(
        id="meditation_scroll", name="Meditation Scroll", description="Improves emotional stability by 20 points",
        icon="\U0001f9d8", price=120, rarity=Rarity.RARE, effect="+20 emotional stability",
        category=ItemCategory.CONSUMABLE,
        buff_effect=BuffEffect(stat_boost={"emotional_stability": 20}, duration=0),
    ),
    ShopItem(
        id="scholar_crown", name="Scholar's Crown", description="Legendary gear. +20% study XP",
        icon="\U0001f451", price=500, rarity=Rarity.LEGENDARY, effect="+20% study XP",
        category=ItemCategory.GEAR,
        buff_effect=BuffEffect(stat_boost={"study": 10}, duration=999, multiplier=1.2),
    ),
    ShopItem(
        id="time_crystal", name="Time Crystal", description="Epic gear. +15% to all XP for 3 days",
        icon="\U0001f48e", price=300, rarity=Rarity.EPIC, effect="+15% to all XP for 3 days",
        category=ItemCategory.GEAR,
        buff_effect=BuffEffect(stat_boost={"time_management": 10}, duration=3, multiplier=1.15),
    ),
    ShopItem(
        id="willpower_amulet", name="Amulet of Willpower", description="Epic gear. Raises motivation by 25 points",
        icon="\U0001f52e", price=250, rarity=Rarity.EPIC, effect="+25 motivation",
        category=ItemCategory.GEAR,
        buff_effect=BuffEffect(stat_boost={"motivation": 25}, duration=0),
    ),
    ShopItem(
        id="gold_star", name="Gold Star", description="Rare gear. Slightly improves every stat",
        icon="⭐", price=180, rarity=Rarity.RARE, effect="+5 to all stats",
        category=ItemCategory.GEAR,
        buff_effect=BuffEffect(
            stat_boost={
                "focus": 5, "discipline": 5, "energy": 5, "motivation": 5,
                "time_management": 5, "study": 5, "emotional_stability": 5,
            },
            duration=0,
        ),
    ),
    ShopItem(
        id="phoenix_feather", name="Phoenix Feather", description="Legendary cosmetic. Shows off your grace",
        icon="\U0001f525", price=400, rarity=Rarity.LEGENDARY, effect="Status only",
        category=ItemCategory.COSMETIC,
    ),
    ShopItem(
        id="scholar_badge", name="Scholar's Medal", description="Rare cosmetic. Shows off your learning",
        icon="\U0001f396️", price=200, rarity=Rarity.RARE, effect="Status only",
        category=ItemCategory.COSMETIC,
    ),
]


def get_shop_item(item_id: str) -> ShopItem | None:
    return next((item for item in SHOP_ITEMS if item.id == item_id), None)


def daily_reward_schedule() -> list[DailyReward]:
    """30-slot schedule. Rewards grow with the slot; every 7th slot adds a focus potion."""
    return [
        DailyReward(
            id=f"day_{n}",
            day_number=n,
            gold_reward=50 + (n - 1) * 10,
            xp_reward=100 + (n - 1) * 25,
            item_reward=REWARD_ITEM_ID if n % REWARD_ITEM_EVERY == 0 else None,
        )
        for n in range(1, REWARD_CYCLE_LENGTH + 1)
    ]
