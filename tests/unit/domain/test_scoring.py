"""Tests for the shared scoring helpers."""

import random
from dataclasses import replace

from conftest import FIXED_NOW, ForbiddenRandom
from payroute.domain.entities.candidate import SettlementAgent
from payroute.domain.entities.engine_config import default_payout_config
from payroute.domain.entities.selection import FactorScore, ScoredCandidate, ScoringContext
from payroute.domain.policies.scoring import (
    apply_random_boost,
    build_summary,
    clamp_score,
    score_all,
)
from payroute.domain.value_objects.enums import ScoreFactor


def _fixed_scorer(scores: dict[str, int]):
    def scorer(candidate, amount, context, config, rng):
        return ScoredCandidate(candidate=candidate, score=scores[candidate.id], factors=[], summary="")

    return scorer


def test_clamp_score():
    assert clamp_score(-12.3) == 0
    assert clamp_score(64.6) == 65
    assert clamp_score(140) == 100


def test_summary_lists_strengths_and_concerns():
    text = build_summary("Ravi", 72, ["very fast"], ["offline", "slow completion"])
    assert text == "Ravi scored 72/100. Strengths: very fast. Concerns: offline, slow completion"


def test_random_boost_skipped_when_disabled():
    config = replace(default_payout_config(), enable_randomness=False)
    factors = [FactorScore(ScoreFactor.SPEED, 10, "x")]
    assert apply_random_boost(factors, config, ForbiddenRandom()) == factors


def test_score_all_ranks_highest_first_and_keeps_ties_stable():
    agents = [SettlementAgent(id=i, name=i, is_active=True) for i in ("a", "b", "c", "d")]
    scorer = _fixed_scorer({"a": 50, "b": 80, "c": 50, "d": 90})

    ranked = score_all(
        agents, 1000, ScoringContext(now=FIXED_NOW), default_payout_config(), scorer, random.Random(0)
    )

    assert [s.candidate_id for s in ranked] == ["d", "b", "a", "c"]
