"""SelectionRules — the per-kind rule set plugged into the generic engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import ScoredCandidate, Validation
from payroute.domain.policies.agent_scoring import score_agent
from payroute.domain.policies.eligibility import prefilter_endpoints
from payroute.domain.policies.endpoint_scoring import score_endpoint
from payroute.domain.policies.realtime_validation import (
    validate_endpoint_realtime,
    validate_realtime,
)
from payroute.domain.policies.scoring import Scorer
from payroute.domain.value_objects.enums import CandidateKind

Validator = Callable[[ScoredCandidate, float, EngineConfig, datetime, str], Validation]
Prefilter = Callable[[list, float, EngineConfig, datetime], list]


@dataclass(frozen=True)
class SelectionRules:
    kind: CandidateKind
    label: str  # singular, capitalised: used in rejection reasons
    plural: str  # used in user-facing error messages
    scorer: Scorer
    validator: Validator
    prefilter: Prefilter | None = None  # drops candidates that cannot take the amount

    def validate(
        self, scored: ScoredCandidate, amount: float, config: EngineConfig, now: datetime
    ) -> Validation:
        return self.validator(scored, amount, config, now, self.label)

    def eligible(self, candidates: list, amount: float, config: EngineConfig, now: datetime) -> list:
        if self.prefilter is None:
            return candidates
        return self.prefilter(candidates, amount, config, now)


PAYIN_RULES = SelectionRules(
    kind=CandidateKind.COLLECTION_ENDPOINT,
    label="Endpoint",
    plural="collection endpoints",
    scorer=score_endpoint,
    validator=validate_endpoint_realtime,
    prefilter=prefilter_endpoints,
)

PAYOUT_RULES = SelectionRules(
    kind=CandidateKind.SETTLEMENT_AGENT,
    label="Agent",
    plural="settlement agents",
    scorer=score_agent,
    validator=validate_realtime,
)
