"""Tests for fresh states, snapshot parsing and load fallback."""

import json
from datetime import date

import pytest

from lifequest.state import SaveFormatError, dump_state, initial_state, load_state, parse_state

TODAY = date(2026, 3, 10)
NOW = "2026-03-10T12:00:00"


class TestInitialState:
    def test_defaults(self):
        state = initial_state(TODAY, NOW)
        assert state.current_day == 1
        assert state.streak == 1
        assert state.xp == 0
        assert state.level == 1
        assert state.gold == 500
        assert state.iron_mode is False
        assert state.season_start_date == "2026-03-10"
        assert state.last_active_date == "2026-03-10"
        assert state.stats.values() == [50] * 8
        assert len(state.buffs) == 4
        assert len(state.debuffs) == 4
        assert len(state.achievements) == 12
        assert len(state.quests) == 10
        assert len(state.daily_rewards) == 30

    def test_states_do_not_share_catalog_objects(self):
        a = initial_state(TODAY, NOW)
        b = initial_state(TODAY, NOW)
        a.buffs[0].active = True
        assert b.buffs[0].active is False

    def test_daily_quests_due_today(self):
        state = initial_state(TODAY, NOW)
        assert state.find_quest("study_today").deadline == "2026-03-10"


class TestParseState:
    def test_round_trip(self):
        state = initial_state(TODAY, NOW)
        state.xp = 450
        state.level = 3
        state.stats.focus = 77
        parsed = parse_state(json.loads(dump_state(state)), TODAY, NOW)
        assert parsed == state

    def test_level_recomputed_from_xp(self):
        data = initial_state(TODAY, NOW).to_dict()
        data["xp"] = 400
        data["level"] = 99
        assert parse_state(data, TODAY, NOW).level == 3

    def test_negative_xp_floored(self):
        data = initial_state(TODAY, NOW).to_dict()
        data["xp"] = -10
        assert parse_state(data, TODAY, NOW).xp == 0

    def test_missing_lists_filled(self):
        data = {"current_day": 4, "streak": 2, "xp": 150}
        state = parse_state(data, TODAY, NOW)
        assert state.current_day == 4
        assert state.level == 2
        assert len(state.daily_rewards) == 30
        assert len(state.quests) == 10
        assert state.study_entries == []

    def test_empty_rewards_and_quests_refilled(self):
        data = initial_state(TODAY, NOW).to_dict()
        data["daily_rewards"] = []
        data["quests"] = []
        state = parse_state(data, TODAY, NOW)
        assert len(state.daily_rewards) == 30
        assert len(state.quests) == 10

    def test_stats_clamped_and_filled(self):
        data = {"stats": {"focus": 140, "energy": -5}}
        stats = parse_state(data, TODAY, NOW).stats
        assert stats.focus == 100
        assert stats.energy == 0
        assert stats.sport == 50

    def test_unknown_keys_ignored(self):
        data = initial_state(TODAY, NOW).to_dict()
        data["buffs"][0]["legacy_field"] = True
        data["theme"] = "dark"
        state = parse_state(data, TODAY, NOW)
        assert state.buffs[0].id == "streak"

    @pytest.mark.parametrize("data", [[], "save", 42, None])
    def test_non_object_rejected(self, data):
        with pytest.raises(SaveFormatError):
            parse_state(data, TODAY, NOW)

    def test_list_field_wrong_type(self):
        with pytest.raises(SaveFormatError):
            parse_state({"goals": "lots"}, TODAY, NOW)

    def test_entry_missing_required_field(self):
        with pytest.raises(SaveFormatError):
            parse_state({"goals": [{"title": "No id"}]}, TODAY, NOW)

    @pytest.mark.parametrize("data", [{"xp": float("inf")}, {"current_day": float("-inf")}, {"gold": float("inf")}])
    def test_infinite_numbers_rejected(self, data):
        with pytest.raises(SaveFormatError):
            parse_state(data, TODAY, NOW)

    @pytest.mark.parametrize("value", ["not-a-date", "", 20260301, None])
    def test_bad_last_active_date_replaced_with_today(self, value):
        state = parse_state({"last_active_date": value}, TODAY, NOW)
        assert state.last_active_date == "2026-03-10"

    def test_valid_last_active_date_kept(self):
        assert parse_state({"last_active_date": "2026-03-01"}, TODAY, NOW).last_active_date == "2026-03-01"

    def test_save_format_error_is_value_error(self):
        assert issubclass(SaveFormatError, ValueError)


class TestLoadState:
    def test_none_gives_fresh_state(self):
        assert load_state(None, TODAY, NOW) == initial_state(TODAY, NOW)

    def test_garbage_gives_fresh_state(self):
        assert load_state("{not json", TODAY, NOW).current_day == 1

    def test_wrong_shape_gives_fresh_state(self):
        assert load_state('{"goals": 5}', TODAY, NOW).goals == []

    def test_infinite_number_gives_fresh_state(self):
        assert load_state('{"current_day": Infinity}', TODAY, NOW).current_day == 1

    def test_valid_blob(self):
        state = initial_state(TODAY, NOW)
        state.gold = 1234
        assert load_state(dump_state(state), TODAY, NOW).gold == 1234


class TestDumpState:
    def test_keeps_unicode(self):
        state = initial_state(TODAY, NOW)
        assert "\U0001f525" in dump_state(state)

    def test_snake_case_keys(self):
        data = json.loads(dump_state(initial_state(TODAY, NOW)))
        assert "current_day" in data
        assert "last_active_date" in data
        assert "xp_reward" in data["daily_rewards"][0]
