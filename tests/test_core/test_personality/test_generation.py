"""Tests for personality generation."""

import random

import pytest

from dynasty.config import get_config
from dynasty.core.enums import Position
from dynasty.core.models import InvalidPlayerError, PlayerRecord
from dynasty.core.personality import (
    Personality,
    generate_personalities,
    generate_personality,
    get_archetype_distribution,
)
from dynasty.core.personality.generation import generate_market_context
from dynasty.core.personality.locations import PRIMARY_WEIGHT, SECONDARY_WEIGHT
from dynasty.core.personality.traits import BEHAVIOR_RANGES


# =============================================================================
# Value Invariants
# =============================================================================


class TestGeneratedValues:
    """Every generated personality stays inside its declared ranges."""

    @pytest.mark.parametrize("seed", range(20))
    def test_weights_sum_to_one(self, qb_record, seed):
        personality = generate_personality(qb_record, 2025, rng=random.Random(seed))
        assert personality.weights.is_normalized()
        for value in personality.weights.to_dict().values():
            assert 0.0 <= value <= 1.0

    @pytest.mark.parametrize("seed", range(20))
    def test_behaviors_within_ranges(self, veteran_rb_record, seed):
        personality = generate_personality(veteran_rb_record, 2025, rng=random.Random(seed))
        for name, value in personality.behaviors.to_dict().items():
            low, high = BEHAVIOR_RANGES[name]
            assert low <= value <= high, name

    @pytest.mark.parametrize("seed", range(20))
    def test_hidden_sliders_within_unit_range(self, wr_record, seed):
        personality = generate_personality(wr_record, 2025, rng=random.Random(seed))
        for value in personality.hidden_sliders.to_dict().values():
            assert 0.0 <= value <= 1.0

    def test_feedback_templates_never_empty(self, qb_record, rng):
        personality = generate_personality(qb_record, 2025, rng=rng)
        for templates in personality.feedback_templates.to_dict().values():
            assert len(templates) > 0

    def test_evolution_ledger_starts_empty(self, qb_record, rng):
        personality = generate_personality(qb_record, 2025, rng=rng)
        ledger = personality.evolution
        assert ledger.evolution_count == 0
        assert ledger.last_evolution_year == 2025
        assert ledger.cooldowns == {}
        assert ledger.life_events == []

    def test_identity_fields_copied_from_player(self, qb_record, rng):
        personality = generate_personality(qb_record, 2025, rng=rng)
        assert personality.player_id == "qb-1"
        assert personality.position == Position.QB
        assert personality.age_at_creation == 27
        assert personality.created_year == 2025


# =============================================================================
# Reproducibility
# =============================================================================


class TestReproducibility:
    """Seeded generators reproduce exactly; different seeds diverge."""

    def test_same_seed_same_personality(self, qb_record):
        first = generate_personality(qb_record, 2025, rng=random.Random(7))
        second = generate_personality(qb_record, 2025, rng=random.Random(7))
        assert first.to_dict() == second.to_dict()

    def test_different_seeds_differ(self, qb_record):
        weights = {
            tuple(generate_personality(qb_record, 2025, rng=random.Random(seed)).weights.to_dict().values())
            for seed in range(5)
        }
        assert len(weights) > 1

    def test_round_trips_through_dict(self, wr_record, rng):
        personality = generate_personality(wr_record, 2025, rng=rng)
        restored = Personality.from_dict(personality.to_dict())
        assert restored.to_dict() == personality.to_dict()


# =============================================================================
# Validation
# =============================================================================


class TestPlayerValidation:
    """Structurally invalid players are rejected before any randomness."""

    def test_missing_position_rejected(self, rng):
        player = PlayerRecord(id="x", position=None, age=25, overall=70)
        with pytest.raises(InvalidPlayerError):
            generate_personality(player, 2025, rng=rng)

    def test_missing_age_rejected(self, rng):
        player = PlayerRecord(id="x", position=Position.CB, age=None, overall=70)
        with pytest.raises(InvalidPlayerError):
            generate_personality(player, 2025, rng=rng)

    def test_out_of_range_overall_rejected(self, rng):
        player = PlayerRecord(id="x", position=Position.CB, age=25, overall=140)
        with pytest.raises(InvalidPlayerError):
            generate_personality(player, 2025, rng=rng)

    def test_invalid_player_error_is_value_error(self):
        assert issubclass(InvalidPlayerError, ValueError)


# =============================================================================
# Archetype Selection
# =============================================================================


class TestArchetypeDistribution:
    """Archetype odds shift with age, rating and position."""

    def test_distribution_sums_to_one(self, qb_record):
        distribution = get_archetype_distribution(qb_record)
        assert sum(distribution.values()) == pytest.approx(1.0)

    def test_veterans_lean_conservative(self, builtin_reference):
        young = PlayerRecord(id="y", position=Position.MLB, age=24, overall=78)
        old = PlayerRecord(id="o", position=young.position, age=33, overall=78)

        young_odds = get_archetype_distribution(young, builtin_reference)
        old_odds = get_archetype_distribution(old, builtin_reference)

        assert old_odds["conservative_veteran"] > young_odds["conservative_veteran"]
        assert old_odds["aggressive_negotiator"] < young_odds["aggressive_negotiator"]

    def test_stars_rarely_desperate(self, builtin_reference):
        star = PlayerRecord(id="s", position=Position.CB, age=26, overall=92)
        depth = PlayerRecord(id="d", position=Position.CB, age=26, overall=65)

        assert (
            get_archetype_distribution(star, builtin_reference)["desperate_signer"]
            < get_archetype_distribution(depth, builtin_reference)["desperate_signer"]
        )

    def test_archetype_comes_from_table(self, qb_record, rng, builtin_reference):
        personality = generate_personality(qb_record, 2025, rng=rng, reference=builtin_reference)
        assert personality.archetype in builtin_reference.archetypes
        assert personality.rarity == builtin_reference.archetypes[personality.archetype].rarity


# =============================================================================
# Blending
# =============================================================================


class TestBlending:
    """Secondary archetype mixing behind the feature flag."""

    def test_disabled_by_default(self, qb_record):
        for seed in range(10):
            personality = generate_personality(qb_record, 2025, rng=random.Random(seed))
            assert not personality.blending.is_blended
            assert personality.blending.primary_archetype == personality.archetype

    def test_enabled_always_blends_at_full_chance(self, qb_record):
        get_config().blend_chance = 1.0
        personality = generate_personality(qb_record, 2025, rng=random.Random(3), blending_enabled=True)
        blending = personality.blending

        assert blending.is_blended
        assert blending.secondary_archetype != blending.primary_archetype
        assert 0.2 <= blending.blend_ratio <= 0.4
        assert set(blending.resolved_params) >= {"money_priority", "holdout_threshold", "counter_offer_multiplier"}

    def test_blended_personality_still_normalized(self, qb_record):
        get_config().blend_chance = 1.0
        for seed in range(10):
            personality = generate_personality(qb_record, 2025, rng=random.Random(seed), blending_enabled=True)
            assert personality.weights.is_normalized()

    def test_zero_chance_never_blends(self, qb_record):
        get_config().blend_chance = 0.0
        personality = generate_personality(qb_record, 2025, rng=random.Random(3), blending_enabled=True)
        assert not personality.blending.is_blended


# =============================================================================
# Market Context, Trade Preferences, Location
# =============================================================================


class TestMarketContext:
    """Position market bands."""

    def test_quarterback_market_scales_with_rating(self, qb_record, rng):
        context = generate_market_context(qb_record, 2025, rng)
        assert context.apy_percentiles.p50 == pytest.approx(90 * 100_000 * 2.5)
        assert context.supply_pressure == 0.8

    def test_percentiles_ordered(self, wr_record, rng):
        context = generate_market_context(wr_record, 2025, rng)
        apy = context.apy_percentiles
        assert apy.p25 < apy.p50 < apy.p75 < apy.p90

    def test_guarantee_percentiles_capped(self, rng):
        elite = PlayerRecord(id="e", position=Position.QB, age=28, overall=99)
        context = generate_market_context(elite, 2025, rng)
        for value in context.guarantee_percentiles.to_dict().values():
            assert value <= 1.0

    def test_unlisted_position_uses_default_market(self, rng):
        kicker = PlayerRecord(id="k", position=Position.K, age=30, overall=80)
        context = generate_market_context(kicker, 2025, rng)
        assert context.supply_pressure == 0.5

    def test_fullback_priced_as_running_back(self, rng):
        fullback = PlayerRecord(id="fb", position=Position.FB, age=27, overall=70)
        context = generate_market_context(fullback, 2025, rng)
        assert context.apy_percentiles.p50 == pytest.approx(70 * 100_000 * 1.2)
        assert context.supply_pressure == 0.3

    @pytest.mark.parametrize("position,category", [
        (Position.QB, "QB"),
        (Position.FB, "RB"),
        (Position.LG, "OL"),
        (Position.NT, "DL"),
        (Position.ILB, "LB"),
        (Position.SS, "DB"),
        (Position.P, "K"),
    ])
    def test_position_categories(self, position, category):
        assert position.category == category

    def test_linemen(self):
        assert Position.C.is_lineman
        assert Position.DE.is_lineman
        assert not Position.TE.is_lineman
        assert not Position.LS.is_lineman


class TestTradePreferences:

    def test_extension_probability_capped(self, veteran_rb_record):
        for seed in range(10):
            personality = generate_personality(veteran_rb_record, 2025, rng=random.Random(seed))
            prefs = personality.trade_preferences
            assert 0.3 <= prefs.requires_extension_probability <= 0.9
            assert 1 <= prefs.reporting_delay_if_unhappy <= 3
            assert prefs.extension_terms.min_years in (2, 3)


class TestGeneratedLocationPreferences:

    def test_primary_then_optional_secondary(self, wr_record):
        for seed in range(10):
            personality = generate_personality(wr_record, 2025, rng=random.Random(seed))
            prefs = personality.location_preferences
            assert 1 <= len(prefs) <= 2
            assert prefs[0].weight == PRIMARY_WEIGHT
            if len(prefs) == 2:
                assert prefs[1].weight == SECONDARY_WEIGHT


class TestBatchGeneration:

    def test_keyed_by_player_id(self, qb_record, wr_record, veteran_rb_record, rng):
        personalities = generate_personalities([qb_record, wr_record, veteran_rb_record], 2025, rng)
        assert set(personalities) == {"qb-1", "wr-1", "rb-1"}
