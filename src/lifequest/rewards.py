"""Daily login rewards on a repeating 30-slot schedule."""

from __future__ import annotations

from dataclasses import dataclass

from lifequest.catalog import REWARD_CYCLE_LENGTH
from lifequest.models import DailyReward, GameState, InventoryItem
from lifequest.xp import award_xp


@dataclass
class ClaimResult:
    ok: bool
    reason: str | None = None
    reward: DailyReward | None = None
    xp_granted: int = 0


def day_in_cycle(current_day: int) -> int:
    """1-indexed slot of ``current_day`` in the cycle: 1..30, then back to 1."""
    return 1 + ((current_day - 1) % REWARD_CYCLE_LENGTH)


def get_today_reward(state: GameState) -> DailyReward | None:
    slot = day_in_cycle(state.current_day)
    return next((r for r in state.daily_rewards if r.day_number == slot), None)


def can_claim_today(state: GameState, today: str) -> bool:
    return state.last_reward_claim_date != today


def add_to_inventory(state: GameState, item_id: str, acquired_at: str, quantity: int = 1) -> InventoryItem:
    """Stack ``quantity`` units of ``item_id`` into the inventory."""
    existing = state.find_inventory(item_id)
    if existing is not None:
        existing.quantity += quantity
        return existing
    item = InventoryItem(item_id=item_id, quantity=quantity, acquired_at=acquired_at)
    state.inventory.append(item)
    return item


def claim_daily_reward(state: GameState, today: str, claimed_at: str) -> ClaimResult:
    """Claim today's slot: gold, XP through the effect pipeline and an optional item.

    Refuses without touching the state when already claimed today or when
    the schedule has no slot for the current day.
    """
    if not can_claim_today(state, today):
        return ClaimResult(ok=False, reason="already_claimed")

    reward = get_today_reward(state)
    if reward is None:
        return ClaimResult(ok=False, reason="no_reward")

    state.gold += reward.gold_reward
    xp_granted = award_xp(state, reward.xp_reward)
    reward.claimed_at = today
    state.last_reward_claim_date = today
    if reward.item_reward:
        add_to_inventory(state, reward.item_reward, claimed_at)

    return ClaimResult(ok=True, reward=reward, xp_granted=xp_granted)
