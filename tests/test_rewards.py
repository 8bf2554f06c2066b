"""Tests for the daily reward cycle."""

from datetime import date

import pytest

from lifequest.catalog import daily_reward_schedule
from lifequest.rewards import add_to_inventory, can_claim_today, claim_daily_reward, day_in_cycle, get_today_reward
from lifequest.state import initial_state

TODAY = "2026-03-10"
NOW = "2026-03-10T12:00:00"


@pytest.fixture
def state():
    return initial_state(date(2026, 3, 10), NOW)


class TestSchedule:
    def test_thirty_slots(self):
        schedule = daily_reward_schedule()
        assert [r.day_number for r in schedule] == list(range(1, 31))

    def test_slot_values(self):
        schedule = daily_reward_schedule()
        assert schedule[0].gold_reward == 50
        assert schedule[0].xp_reward == 100
        assert schedule[29].gold_reward == 340
        assert schedule[29].xp_reward == 825

    def test_item_every_seventh_slot(self):
        with_items = [r.day_number for r in daily_reward_schedule() if r.item_reward]
        assert with_items == [7, 14, 21, 28]


class TestDayInCycle:
    @pytest.mark.parametrize("day,slot", [(1, 1), (7, 7), (29, 29), (30, 30), (31, 1), (60, 30), (61, 1)])
    def test_wraps_after_thirty(self, day, slot):
        assert day_in_cycle(day) == slot


class TestGetTodayReward:
    def test_day_seven(self, state):
        state.current_day = 7
        reward = get_today_reward(state)
        assert reward.day_number == 7
        assert reward.gold_reward == 110
        assert reward.xp_reward == 250
        assert reward.item_reward == "focus_potion"

    def test_missing_schedule(self, state):
        state.daily_rewards = []
        assert get_today_reward(state) is None


class TestClaimDailyReward:
    def test_claim_day_seven(self, state):
        state.current_day = 7
        result = claim_daily_reward(state, TODAY, NOW)
        assert result.ok is True
        assert result.xp_granted == 250
        assert state.gold == 610
        assert state.xp == 250
        assert state.find_inventory("focus_potion").quantity == 1
        assert state.last_reward_claim_date == TODAY
        assert result.reward.claimed_at == TODAY

    def test_second_claim_same_day_rejected(self, state):
        claim_daily_reward(state, TODAY, NOW)
        gold, xp = state.gold, state.xp
        result = claim_daily_reward(state, TODAY, NOW)
        assert result.ok is False
        assert result.reason == "already_claimed"
        assert (state.gold, state.xp) == (gold, xp)

    def test_claim_next_day_allowed(self, state):
        claim_daily_reward(state, TODAY, NOW)
        assert can_claim_today(state, "2026-03-11") is True

    def test_no_reward_scheduled(self, state):
        state.daily_rewards = []
        result = claim_daily_reward(state, TODAY, NOW)
        assert result.ok is False
        assert result.reason == "no_reward"
        assert state.last_reward_claim_date is None


class TestInventory:
    def test_items_stack(self, state):
        add_to_inventory(state, "energy_drink", NOW)
        add_to_inventory(state, "energy_drink", NOW, quantity=2)
        assert len(state.inventory) == 1
        assert state.inventory[0].quantity == 3
