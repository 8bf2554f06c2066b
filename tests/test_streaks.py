"""Tests for streak tracking and the day rollover."""

from datetime import date

import pytest

from lifequest.models import Buff
from lifequest.state import initial_state
from lifequest.streaks import (
    apply_day_rollover,
    days_between,
    expire_buffs,
    missed_day_penalty,
    next_streak,
)

TODAY = date(2026, 3, 10)


@pytest.fixture
def state():
    s = initial_state(date(2026, 3, 1), "2026-03-01T09:00:00")
    s.current_day = 5
    s.streak = 4
    return s


class TestDaysBetween:
    def test_same_day(self):
        assert days_between("2026-03-10", TODAY) == 0

    def test_yesterday(self):
        assert days_between("2026-03-09", TODAY) == 1

    def test_future_date_is_negative(self):
        assert days_between("2026-03-12", TODAY) == -2

    def test_garbage_counts_as_today(self):
        assert days_between("not a date", TODAY) == 0


class TestMissedDayPenalty:
    def test_no_penalty_for_consecutive_day(self):
        assert missed_day_penalty(1) == 0

    def test_one_missed_day(self):
        assert missed_day_penalty(2) == 15

    def test_capped_at_30(self):
        assert missed_day_penalty(3) == 30
        assert missed_day_penalty(40) == 30


class TestNextStreak:
    def test_consecutive_day_extends(self):
        assert next_streak(4, 1) == 5

    def test_gap_resets(self):
        assert next_streak(4, 2) == 0

    def test_same_day_unchanged(self):
        assert next_streak(4, 0) == 4


class TestApplyDayRollover:
    def test_same_day_is_noop(self, state):
        state.last_active_date = TODAY.isoformat()
        result = apply_day_rollover(state, TODAY)
        assert result.changed is False
        assert state.current_day == 5
        assert state.streak == 4

    def test_consecutive_day(self, state):
        state.last_active_date = "2026-03-09"
        state.find_debuff("missed").active = True
        result = apply_day_rollover(state, TODAY)
        assert result.changed is True
        assert state.streak == 5
        assert state.current_day == 6
        assert state.last_active_date == "2026-03-10"
        assert state.find_debuff("missed").active is False
        assert state.stats.discipline == 50

    def test_three_day_gap(self, state):
        state.last_active_date = "2026-03-07"
        result = apply_day_rollover(state, TODAY)
        assert result.days_diff == 3
        assert result.discipline_penalty == 30
        assert state.streak == 0
        assert state.current_day == 8
        assert state.stats.discipline == 20
        assert state.find_debuff("missed").active is True

    def test_discipline_floored_at_zero(self, state):
        state.last_active_date = "2026-03-01"
        state.stats.discipline = 10
        apply_day_rollover(state, TODAY)
        assert state.stats.discipline == 0

    def test_clock_moved_backwards_is_noop(self, state):
        state.last_active_date = "2026-03-15"
        result = apply_day_rollover(state, TODAY)
        assert result.changed is False
        assert state.current_day == 5
        assert state.last_active_date == "2026-03-15"

    def test_second_call_same_day_changes_nothing(self, state):
        state.last_active_date = "2026-03-08"
        apply_day_rollover(state, TODAY)
        snapshot = state.to_dict()
        result = apply_day_rollover(state, TODAY)
        assert result.changed is False
        assert state.to_dict() == snapshot


class TestExpireBuffs:
    def _item_buff(self, expires_on):
        return Buff(id="item_x", name="Potion", icon="", effect="", multiplier=1.25,
                    active=True, expires_on=expires_on)

    def test_expired_buff_deactivated(self, state):
        state.buffs.append(self._item_buff("2026-03-09"))
        assert expire_buffs(state, TODAY) == ["item_x"]
        assert state.find_buff("item_x").active is False

    def test_buff_valid_through_expiry_day(self, state):
        state.buffs.append(self._item_buff("2026-03-10"))
        assert expire_buffs(state, TODAY) == []
        assert state.find_buff("item_x").active is True

    def test_buffs_without_expiry_untouched(self, state):
        state.find_buff("streak").active = True
        expire_buffs(state, TODAY)
        assert state.find_buff("streak").active is True

    def test_rollover_expires_item_buffs(self, state):
        state.last_active_date = "2026-03-09"
        state.buffs.append(self._item_buff("2026-03-09"))
        result = apply_day_rollover(state, TODAY)
        assert result.expired_buffs == ["item_x"]
