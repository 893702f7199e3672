"""FallbackChainPolicy — draw, validate, exclude and retry within a budget.

State machine per call:

    ATTEMPTING(1) ──valid──▶ SUCCESS
        │
        └─invalid─▶ REJECTED ──(n < budget)──▶ ATTEMPTING(n+1)
                        │
                        └──(n == budget)──▶ EXHAUSTED

An empty pool or a draw with nobody above threshold ends the chain early.
Every terminal state carries the full attempt trail.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from enum import Enum
from typing import Sequence

from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import (
    ScoredCandidate,
    SelectionAttempt,
    SelectionResult,
)
from payroute.domain.policies.rules import SelectionRules
from payroute.domain.policies.weighted_selection import weighted_pick
from payroute.domain.value_objects.enums import SelectionErrorKind

logger = logging.getLogger(__name__)


class ChainState(str, Enum):
    ATTEMPTING = "attempting"
    REJECTED = "rejected"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


def select_with_fallback(
    scored: Sequence[ScoredCandidate],
    amount: float,
    config: EngineConfig,
    rules: SelectionRules,
    rng: random.Random,
    now: datetime,
) -> SelectionResult:
    """Run the fallback chain over a ranked candidate list.

    Args:
        scored: candidates sorted by score, highest first.
        amount: request amount, passed through to the real-time validator.
        config: threshold, pool size, exponent and attempt budget.
        rules: the candidate kind's validator and labels.
        rng: random source for the weighted draw.
        now: reference time for cooldown checks.

    Returns:
        SelectionResult; ``attempts`` lists every drawn candidate in order.
    """
    budget = config.attempt_budget
    excluded: set[str] = set()
    attempts: list[SelectionAttempt] = []
    exhausted_error = f"No suitable {rules.plural} available after all attempts"

    for n in range(1, budget + 1):
        logger.debug("%s attempt %d/%d", ChainState.ATTEMPTING.value, n, budget)

        available = [s for s in scored if s.candidate_id not in excluded]
        if not available:
            logger.info("No more %s to try after %d attempt(s)", rules.plural, len(attempts))
            return SelectionResult.failure(
                SelectionErrorKind.POOL_EXHAUSTED, exhausted_error, attempts
            )

        pick = weighted_pick(available, config, rng)
        if pick is None:
            logger.info(
                "No %s above minimum score %s", rules.plural, config.min_score_threshold
            )
            return SelectionResult.failure(
                SelectionErrorKind.BELOW_THRESHOLD, exhausted_error, attempts
            )

        verdict = rules.validate(pick, amount, config, now)
        attempts.append(
            SelectionAttempt(
                attempt=n,
                candidate_id=pick.candidate_id,
                candidate_name=pick.candidate_name,
                score=pick.score,
                valid=verdict.valid,
                reason=verdict.reason,
            )
        )

        if verdict.valid:
            logger.debug("%s: %s (score %d)", ChainState.SUCCESS.value, pick.candidate_id, pick.score)
            return SelectionResult(success=True, selected=pick, attempts=attempts)

        logger.info(
            "%s %s rejected on attempt %d: %s",
            rules.label, pick.candidate_id, n, verdict.reason,
        )
        excluded.add(pick.candidate_id)

    logger.info("%s: %d attempt(s) used", ChainState.EXHAUSTED.value, len(attempts))
    return SelectionResult.failure(
        SelectionErrorKind.ATTEMPTS_EXHAUSTED, exhausted_error, attempts
    )
