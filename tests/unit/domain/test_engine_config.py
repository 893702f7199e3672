"""Tests for EngineConfig defaults and sanity checks."""

from dataclasses import replace

import pytest

from payroute.domain.entities.engine_config import (
    PAYIN_WEIGHTS,
    PAYOUT_WEIGHTS,
    TierRange,
    default_config_for,
    default_payin_config,
    default_payout_config,
)
from payroute.domain.value_objects.enums import AmountTier, CandidateKind, ScoreFactor


def test_default_weight_totals():
    assert sum(PAYIN_WEIGHTS.values()) == 95
    assert sum(PAYOUT_WEIGHTS.values()) == 100


def test_default_for_kind():
    assert default_config_for(CandidateKind.COLLECTION_ENDPOINT).kind == CandidateKind.COLLECTION_ENDPOINT
    payout = default_config_for(CandidateKind.SETTLEMENT_AGENT)
    assert payout.min_score_threshold == 20
    assert payout.max_daily_count == 100
    assert payout.weight(ScoreFactor.SPEED) == 20


def test_unweighted_factor_is_zero():
    assert default_payin_config().weight(ScoreFactor.SPEED) == 0.0


def test_attempt_budget_follows_fallback_flag():
    config = default_payin_config()
    assert config.attempt_budget == 3
    assert replace(config, enable_fallback=False).attempt_budget == 1


def test_defaults_are_independent_copies():
    a = default_payin_config()
    b = default_payin_config()
    a.weights[ScoreFactor.SUCCESS_RATE] = 99
    assert b.weight(ScoreFactor.SUCCESS_RATE) == 25


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"cooldown_minutes": -1}, "cooldown_minutes must be >= 0"),
        ({"max_candidates": 0}, "max_candidates must be >= 1"),
        ({"score_exponent": 0}, "score_exponent must be > 0"),
        ({"max_fallback_attempts": 0}, "max_fallback_attempts must be >= 1"),
        ({"randomness_factor": 1.5}, "randomness_factor must be <= 1"),
        ({"default_min_amount": 60_000}, "default_min_amount must not exceed"),
    ],
)
def test_validate_rejects_bad_values(overrides, message):
    with pytest.raises(ValueError, match=message):
        replace(default_payin_config(), **overrides).validate()


def test_validate_rejects_unordered_tiers():
    tiers = {
        AmountTier.LOW: TierRange(0, 20_000),
        AmountTier.MEDIUM: TierRange(0, 10_000),
        AmountTier.HIGH: TierRange(0, 50_000),
    }
    with pytest.raises(ValueError, match="ascending"):
        replace(default_payin_config(), amount_tiers=tiers).validate()


def test_validate_rejects_missing_tier():
    tiers = {AmountTier.LOW: TierRange(0, 1_000)}
    with pytest.raises(ValueError, match="amount_tiers missing"):
        replace(default_payin_config(), amount_tiers=tiers).validate()


def test_snapshot_is_json_friendly():
    snap = default_payout_config().snapshot()
    assert snap["kind"] == "payout"
    assert snap["weights"]["speed"] == 20
    assert snap["amount_tiers"]["low"] == {"minimum": 100, "maximum": 5_000}
    assert snap["speed_benchmarks"] == {"excellent": 5, "good": 15, "acceptable": 30}
