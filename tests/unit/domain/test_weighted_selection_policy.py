"""Tests for WeightedSelectionPolicy."""

import random
from collections import Counter
from dataclasses import replace

import pytest

from conftest import ForbiddenRandom, SequenceRandom
from payroute.domain.entities.candidate import SettlementAgent
from payroute.domain.entities.engine_config import default_payout_config
from payroute.domain.entities.selection import ScoredCandidate
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.weighted_selection import selection_weights, weighted_pick


def _scored(cid: str, score: int) -> ScoredCandidate:
    agent = SettlementAgent(id=cid, name=cid.upper(), is_active=True, stats=UsageStats())
    return ScoredCandidate(candidate=agent, score=score, factors=[], summary="")


def _config(**overrides):
    return replace(default_payout_config(), **overrides)


def test_weights_are_score_to_the_exponent():
    pool = [_scored("a", 95), _scored("b", 55)]
    assert selection_weights(pool, 2) == [9025.0, 3025.0]
    assert selection_weights(pool, 1) == [95.0, 55.0]


def test_nobody_above_threshold_returns_none():
    config = _config(min_score_threshold=50)
    assert weighted_pick([_scored("a", 49), _scored("b", 10)], config, random.Random(1)) is None


def test_empty_list_returns_none():
    assert weighted_pick([], _config(), random.Random(1)) is None


def test_single_survivor_consumes_no_randomness():
    config = _config(min_score_threshold=50)
    pool = [_scored("a", 80), _scored("b", 40)]
    assert weighted_pick(pool, config, ForbiddenRandom()).candidate_id == "a"


def test_single_candidate_is_deterministic():
    only = [_scored("solo", 60)]
    picks = {weighted_pick(only, _config(), ForbiddenRandom()).candidate_id for _ in range(20)}
    assert picks == {"solo"}


def test_draw_walks_cumulative_weights():
    """u * total is consumed left to right: 9025 / 3025 split."""
    pool = [_scored("a", 95), _scored("b", 55)]
    config = _config(min_score_threshold=0)
    assert weighted_pick(pool, config, SequenceRandom([0.0])).candidate_id == "a"
    assert weighted_pick(pool, config, SequenceRandom([0.74])).candidate_id == "a"
    assert weighted_pick(pool, config, SequenceRandom([0.76])).candidate_id == "b"
    assert weighted_pick(pool, config, SequenceRandom([0.999])).candidate_id == "b"


def test_frequencies_converge_to_weight_shares():
    pool = [_scored("a", 90), _scored("b", 60), _scored("c", 30)]
    config = _config(min_score_threshold=0)
    rng = random.Random(42)
    n = 20_000

    counts = Counter(weighted_pick(pool, config, rng).candidate_id for _ in range(n))

    total = 90**2 + 60**2 + 30**2
    for cid, score in (("a", 90), ("b", 60), ("c", 30)):
        assert counts[cid] / n == pytest.approx(score**2 / total, abs=0.02)


def test_threshold_removes_low_scorers_from_the_draw():
    """95 / 55 / 20 at threshold 50: 20 never wins, 95 wins ~75%."""
    pool = [_scored("a", 95), _scored("b", 55), _scored("c", 20)]
    config = _config(min_score_threshold=50)
    rng = random.Random(7)
    n = 10_000

    counts = Counter(weighted_pick(pool, config, rng).candidate_id for _ in range(n))

    assert counts["c"] == 0
    assert counts["a"] / n == pytest.approx(9025 / 12050, abs=0.02)


def test_max_candidates_caps_the_pool():
    pool = [_scored("a", 95), _scored("b", 55), _scored("c", 54)]
    config = _config(min_score_threshold=0, max_candidates=2)
    rng = random.Random(3)

    picks = {weighted_pick(pool, config, rng).candidate_id for _ in range(2_000)}

    assert picks == {"a", "b"}


def test_all_zero_scores_fall_back_to_first():
    pool = [_scored("a", 0), _scored("b", 0)]
    config = _config(min_score_threshold=0)
    assert weighted_pick(pool, config, ForbiddenRandom()).candidate_id == "a"


def test_seeded_draws_are_reproducible():
    pool = [_scored("a", 90), _scored("b", 70), _scored("c", 50)]
    config = _config(min_score_threshold=0)

    rng1, rng2 = random.Random(99), random.Random(99)
    first = [weighted_pick(pool, config, rng1).candidate_id for _ in range(50)]
    second = [weighted_pick(pool, config, rng2).candidate_id for _ in range(50)]

    assert first == second
