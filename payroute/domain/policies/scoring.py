"""Scoring building blocks shared by the endpoint and agent scorers."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from payroute.domain.entities.candidate import Candidate
from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import FactorScore, ScoredCandidate, ScoringContext
from payroute.domain.value_objects.enums import ScoreFactor

MAX_SCORE = 100

# Success rate assumed for candidates without any settled history
DEFAULT_SUCCESS_RATE = 80.0

Scorer = Callable[
    [Candidate, float, ScoringContext, EngineConfig, random.Random],
    ScoredCandidate,
]


def clamp_score(total: float) -> int:
    return int(min(MAX_SCORE, max(0, round(total))))


def apply_random_boost(
    factors: list[FactorScore],
    config: EngineConfig,
    rng: random.Random,
) -> list[FactorScore]:
    """Append a ±(randomness_factor / 2) variation when randomness is enabled."""
    if not config.enable_randomness or config.randomness_factor <= 0:
        return factors

    subtotal = sum(f.points for f in factors)
    boost = (rng.random() - 0.5) * config.randomness_factor * subtotal
    return [
        *factors,
        FactorScore(ScoreFactor.RANDOM_BOOST, boost, f"Random variation → {boost:+.1f}pts"),
    ]


def build_summary(name: str, score: int, strengths: list[str], concerns: list[str]) -> str:
    """Human-readable one-liner: score, then notable strengths and concerns."""
    parts = [f"{name} scored {score}/100"]
    if strengths:
        parts.append(f"Strengths: {', '.join(strengths)}")
    if concerns:
        parts.append(f"Concerns: {', '.join(concerns)}")
    return ". ".join(parts)


def finalize(
    candidate: Candidate,
    factors: list[FactorScore],
    strengths: list[str],
    concerns: list[str],
    config: EngineConfig,
    rng: random.Random,
) -> ScoredCandidate:
    factors = apply_random_boost(factors, config, rng)
    score = clamp_score(sum(f.points for f in factors))
    return ScoredCandidate(
        candidate=candidate,
        score=score,
        factors=factors,
        summary=build_summary(candidate.name or candidate.id, score, strengths, concerns),
    )


def score_all(
    candidates: Sequence[Candidate],
    amount: float,
    context: ScoringContext,
    config: EngineConfig,
    scorer: Scorer,
    rng: random.Random,
) -> list[ScoredCandidate]:
    """Score every candidate and rank them, highest first.

    The sort is stable, so equal scores keep the repository's order.
    """
    scored = [scorer(c, amount, context, config, rng) for c in candidates]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored
