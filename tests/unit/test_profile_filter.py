"""Tests for profile selection — system profile exclusion and visibility specs."""

from __future__ import annotations

import pytest

from questlock.core.profile_filter import ProfileVisibility, is_player_profile


class TestIsPlayerProfile:
    @pytest.mark.parametrize("profile_id", ["headless_abc", "bot_1"])
    def test_system_profiles_rejected(self, profile_id):
        assert is_player_profile(profile_id, ["headless_", "bot_"]) is False

    def test_player_profile_accepted(self):
        assert is_player_profile("6745a1b2c3", ["headless_", "bot_"]) is True

    def test_prefix_must_lead(self):
        assert is_player_profile("my_bot_profile", ["bot_"]) is True


class TestProfileVisibility:
    def test_wildcard_shows_all(self):
        visibility = ProfileVisibility.parse("*")
        assert visibility.shows_all is True
        assert visibility.is_visible("Anyone") is True

    def test_empty_spec_shows_all(self):
        assert ProfileVisibility.parse("").shows_all is True
        assert ProfileVisibility.parse(None).shows_all is True

    def test_empty_name_never_visible(self):
        assert ProfileVisibility.parse("*").is_visible("") is False
        assert ProfileVisibility.parse("*").is_visible(None) is False

    def test_whitelist(self):
        visibility = ProfileVisibility.parse("Luna, Sol")
        assert visibility.is_visible("luna") is True
        assert visibility.is_visible("SOL") is True
        assert visibility.is_visible("Mars") is False

    def test_wildcard_with_exclusion(self):
        visibility = ProfileVisibility.parse("*,-Scav")
        assert visibility.is_visible("Luna") is True
        assert visibility.is_visible("scav") is False

    def test_exclusion_only(self):
        visibility = ProfileVisibility.parse("-Scav")
        assert visibility.is_visible("Luna") is True
        assert visibility.is_visible("Scav") is False

    def test_named_inclusion_beats_wildcard(self):
        visibility = ProfileVisibility.parse("*,Luna")
        assert visibility.is_visible("Luna") is True
        assert visibility.is_visible("Sol") is False

    def test_exclusion_beats_inclusion(self):
        visibility = ProfileVisibility.parse("Luna,-Luna")
        assert visibility.is_visible("Luna") is False
