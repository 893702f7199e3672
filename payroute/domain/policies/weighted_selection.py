"""WeightedSelectionPolicy — one probabilistic draw over ranked candidates."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import ScoredCandidate

logger = logging.getLogger(__name__)


def selection_weights(candidates: Sequence[ScoredCandidate], exponent: float) -> list[float]:
    return [float(c.score) ** exponent for c in candidates]


def weighted_pick(
    scored: Sequence[ScoredCandidate],
    config: EngineConfig,
    rng: random.Random,
) -> ScoredCandidate | None:
    """Roulette draw biased toward higher scores.

    1. Drop candidates below ``min_score_threshold``; none left → None.
    2. A single survivor is returned without touching ``rng``.
    3. The top ``max_candidates`` (input is already ranked) compete with
       weight ``score ** score_exponent``.
    4. ``u * total`` is walked down the cumulative weights; the candidate
       whose weight takes the remainder to <= 0 wins, so candidate *i* is
       chosen with probability ``weight_i / total``.

    Args:
        scored: candidates sorted by score, highest first.
        config: threshold, pool size and exponent.
        rng: random source; pass a seeded ``random.Random`` for repeatable draws.
    """
    eligible = [c for c in scored if c.score >= config.min_score_threshold]
    if not eligible:
        logger.debug("No candidates above minimum threshold %s", config.min_score_threshold)
        return None

    if len(eligible) == 1:
        return eligible[0]

    pool = eligible[: config.max_candidates]
    weights = selection_weights(pool, config.score_exponent)
    total = sum(weights)
    if total <= 0:
        # Every competitor scored zero
        return pool[0]

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Drawing from %d candidates: %s",
            len(pool),
            ", ".join(f"{c.candidate_id}={w / total:.1%}" for c, w in zip(pool, weights)),
        )

    remaining = rng.random() * total
    for candidate, weight in zip(pool, weights):
        remaining -= weight
        if remaining <= 0:
            return candidate

    # Floating-point drift left a sliver of remainder
    return pool[0]
