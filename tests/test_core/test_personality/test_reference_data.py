"""Tests for the archetype/location reference table and its fallbacks."""

import json

import pytest

from dynasty.config import get_config
from dynasty.core.personality import (
    get_reference_data,
    load_reference_data,
    set_reference_data,
)
from dynasty.core.personality.archetypes import (
    DEFAULT_FEEDBACK,
    DEFAULT_TABLE_PATH,
    FEEDBACK_CATEGORIES,
    builtin_reference_data,
)
from dynasty.core.personality.traits import LocationTrait, NegotiationStyle


def minimal_entry(**overrides) -> dict:
    entry = {
        "rarity": 0.5,
        "traits": {
            "negotiation_style": "flexible",
            "risk_tolerance": "medium",
            "team_loyalty": "medium",
            "location_preference": "neutral",
            "deadline_behavior": "compromise",
        },
        "weights": {
            "money_priority": 0.5,
            "winning_priority": 0.5,
            "location_priority": 0.5,
            "guarantee_priority": 0.5,
            "length_priority": 0.5,
        },
        "behaviors": {
            "holdout_threshold": 0.5,
            "counter_offer_multiplier": 1.1,
            "deadline_softening": 0.02,
            "comparison_weight": 0.5,
            "deadline_susceptibility": 0.5,
        },
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def write_table(tmp_path):
    """Write a JSON table to a temp file and return its path."""
    def write(table) -> str:
        path = tmp_path / "archetypes.json"
        path.write_text(table if isinstance(table, str) else json.dumps(table), encoding="utf-8")
        return str(path)
    return write


class TestPackagedTable:
    """The table shipped with the package."""

    def test_packaged_table_loads(self):
        reference = load_reference_data()
        assert reference.source == str(DEFAULT_TABLE_PATH)
        assert reference.version >= 1
        assert len(reference.archetypes) == 7

    def test_any_location_normalized_to_neutral(self):
        reference = load_reference_data()
        desperate = reference.get_archetype("desperate_signer")
        assert desperate.location_preference == LocationTrait.NEUTRAL
        assert desperate.negotiation_style == NegotiationStyle.DESPERATE

    def test_every_category_has_templates(self):
        reference = load_reference_data()
        for archetype in reference.archetypes.values():
            for category in FEEDBACK_CATEGORIES:
                assert archetype.templates_for(category)

    def test_cities_for_every_preference_type(self):
        reference = load_reference_data()
        for pref_type in ("big_markets", "warm_weather", "cold_weather", "rural_areas", "tax_conscious"):
            assert reference.cities_for(pref_type)


class TestFallback:
    """Any read, parse or validation failure falls back to the built-in table."""

    def test_missing_file(self, tmp_path):
        reference = load_reference_data(tmp_path / "does-not-exist.json")
        assert reference.source == "builtin"
        assert set(reference.archetypes) == set(builtin_reference_data().archetypes)

    def test_invalid_json(self, write_table):
        reference = load_reference_data(write_table("{not json"))
        assert reference.source == "builtin"

    def test_schema_violation(self, write_table):
        table = {"version": 2, "personality_types": {"broken": minimal_entry(rarity=0.0)}}
        assert load_reference_data(write_table(table)).source == "builtin"

    def test_out_of_range_behavior(self, write_table):
        entry = minimal_entry()
        entry["behaviors"]["counter_offer_multiplier"] = 3.0
        table = {"personality_types": {"broken": entry}}
        assert load_reference_data(write_table(table)).source == "builtin"

    def test_unknown_hidden_slider(self, write_table):
        table = {"personality_types": {"broken": minimal_entry(hidden_sliders={"charisma": 0.5})}}
        assert load_reference_data(write_table(table)).source == "builtin"

    def test_empty_table(self, write_table):
        assert load_reference_data(write_table({"personality_types": {}})).source == "builtin"


class TestCustomTable:
    """Valid external tables are honored."""

    def test_custom_table(self, write_table):
        table = {
            "version": 3,
            "personality_types": {
                "grinder": minimal_entry(
                    feedback_templates={
                        "accept": "Let's get to work.",
                        "location_comment": "Anywhere is fine.",
                    },
                ),
            },
            "location_preferences": {"big_markets": {"cities": ["Chicago"]}},
        }
        reference = load_reference_data(write_table(table))
        grinder = reference.get_archetype("grinder")

        assert reference.version == 3
        assert grinder.name == "Grinder"
        assert grinder.templates_for("accept") == ["Let's get to work."]
        assert grinder.templates_for("counter_offer") == DEFAULT_FEEDBACK["counter_offer"]
        assert "location_comment" not in grinder.feedback_templates
        assert reference.cities_for("big_markets") == ["Chicago"]

    def test_hidden_slider_override(self, write_table):
        table = {"personality_types": {"diva": minimal_entry(hidden_sliders={"ego": 0.95})}}
        diva = load_reference_data(write_table(table)).get_archetype("diva")
        assert diva.hidden_slider_anchor("ego") == (0.95, 0.3)
        assert diva.hidden_slider_anchor("agent_quality") == (0.6, 0.3)

    def test_config_path_used_by_shared_tables(self, write_table):
        path = write_table({"version": 9, "personality_types": {"solo": minimal_entry()}})
        get_config().archetype_table_path = path
        set_reference_data(None)

        assert get_reference_data().version == 9
        assert list(get_reference_data().archetypes) == ["solo"]
