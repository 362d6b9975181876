"""Tests for location preferences and team-fit scoring."""

import random

import pytest

from dynasty.core.enums import Position
from dynasty.core.models import Climate, MarketSize, PlayerRecord, TeamLocation
from dynasty.core.personality import (
    LocationPreference,
    PreferenceType,
    calculate_location_match,
    generate_location_preferences,
)
from dynasty.core.personality.locations import preference_match


def pref(pref_type: PreferenceType, weight: float = 0.8, **kwargs) -> LocationPreference:
    return LocationPreference(type=pref_type, weight=weight, **kwargs)


class TestTypeMatch:
    """Each preference type scores a team on its own dimension."""

    def test_big_markets(self, texas_team, small_market_team):
        assert preference_match(pref(PreferenceType.BIG_MARKETS), texas_team) == 1.0
        assert preference_match(pref(PreferenceType.BIG_MARKETS), small_market_team) == 0.0

    def test_medium_market_partial(self):
        team = TeamLocation(team_id="KC", city="Kansas City", state="MO", market_size=MarketSize.MEDIUM)
        assert preference_match(pref(PreferenceType.BIG_MARKETS), team) == 0.75
        assert preference_match(pref(PreferenceType.RURAL_AREAS), team) == 0.5

    def test_weather(self, texas_team, new_york_team):
        assert preference_match(pref(PreferenceType.WARM_WEATHER), texas_team) == 1.0
        assert preference_match(pref(PreferenceType.WARM_WEATHER), new_york_team) == 0.0
        assert preference_match(pref(PreferenceType.COLD_WEATHER), new_york_team) == 1.0

    def test_current_team(self, texas_team):
        current = pref(PreferenceType.CURRENT_TEAM)
        assert preference_match(current, texas_team, current_team_id="DAL") == 1.0
        assert preference_match(current, texas_team, current_team_id="NYG") == 0.0
        assert preference_match(current, texas_team) == 0.0

    def test_winning_and_stable(self, texas_team, new_york_team):
        assert preference_match(pref(PreferenceType.WINNING_TEAMS), texas_team) == 1.0
        assert preference_match(pref(PreferenceType.WINNING_TEAMS), new_york_team) == 0.3

        unstable = TeamLocation(team_id="LV", city="Las Vegas", state="NV", is_stable=False)
        assert preference_match(pref(PreferenceType.STABLE_MARKETS), unstable) == 0.4

    def test_tax_conscious(self, texas_team, new_york_team):
        tax = pref(PreferenceType.TAX_CONSCIOUS, tax_sensitivity=1.0)
        assert preference_match(tax, texas_team) == 1.0
        assert preference_match(tax, new_york_team) == 0.0

    def test_neutral(self, new_york_team):
        assert preference_match(pref(PreferenceType.NEUTRAL), new_york_team) == 0.5


class TestExplicitRules:
    """Explicit city/state/climate/market rules force a full match."""

    def test_city_match(self, texas_team):
        rural = pref(PreferenceType.RURAL_AREAS, cities=["Dallas"])
        assert preference_match(rural, texas_team) == 1.0

    def test_wildcard_city_ignored(self, texas_team):
        rural = pref(PreferenceType.RURAL_AREAS, cities=["*"])
        assert preference_match(rural, texas_team) == 0.0

    def test_state_match_case_insensitive(self, texas_team):
        rural = pref(PreferenceType.RURAL_AREAS, states=["tx"])
        assert preference_match(rural, texas_team) == 1.0

    def test_climate_rule(self, texas_team):
        neutral = pref(PreferenceType.NEUTRAL, climates=[Climate.WARM])
        assert preference_match(neutral, texas_team) == 1.0

    def test_tax_sensitivity_discounts_other_types(self, texas_team, new_york_team):
        big = pref(PreferenceType.BIG_MARKETS, tax_sensitivity=1.0)
        assert preference_match(big, texas_team) == 1.0
        assert preference_match(big, new_york_team) == pytest.approx(0.5)


class TestCalculateLocationMatch:

    def test_no_preferences_is_neutral(self, texas_team):
        assert calculate_location_match([], texas_team) == 0.5

    def test_zero_weights_are_neutral(self, texas_team):
        assert calculate_location_match([pref(PreferenceType.BIG_MARKETS, weight=0.0)], texas_team) == 0.5

    def test_weighted_mean(self, texas_team):
        prefs = [pref(PreferenceType.BIG_MARKETS, 0.8), pref(PreferenceType.RURAL_AREAS, 0.4)]
        assert calculate_location_match(prefs, texas_team) == pytest.approx(0.8 / 1.2)

    def test_generated_preferences_stay_bounded(self, texas_team, new_york_team, small_market_team, builtin_reference):
        player = PlayerRecord(id="x", position=Position.WR, age=26, overall=80)
        for seed in range(10):
            generated = generate_location_preferences(player, random.Random(seed), builtin_reference)
            for team in (texas_team, new_york_team, small_market_team):
                assert 0.0 <= calculate_location_match(generated, team) <= 1.0

    def test_round_trip(self):
        preference = pref(PreferenceType.WARM_WEATHER, cities=["Miami"], climates=[Climate.WARM])
        assert LocationPreference.from_dict(preference.to_dict()) == preference


class TestGeneratePreferences:

    def test_rule_lists_follow_type(self, builtin_reference):
        player = PlayerRecord(id="x", position=Position.CB, age=26, overall=80)
        for seed in range(30):
            for preference in generate_location_preferences(player, random.Random(seed), builtin_reference):
                if preference.type == PreferenceType.WARM_WEATHER:
                    assert preference.climates == [Climate.WARM]
                if preference.type == PreferenceType.BIG_MARKETS:
                    assert preference.market_sizes == [MarketSize.LARGE]
                assert preference.cities
