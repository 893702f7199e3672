"""SelectionLogEntry entity — the explanation trail of one selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from payroute.domain.entities.selection import ScoredCandidate, SelectionResult
from payroute.domain.value_objects.enums import AmountTier, CandidateKind


@dataclass
class SelectionLogEntry:
    kind: CandidateKind
    request_id: str | None
    subject_id: str | None
    amount: float
    amount_tier: AmountTier
    candidates_count: int
    candidates: list[ScoredCandidate]  # top N of the ranking
    result: SelectionResult
    config: dict[str, Any]
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        selected = None
        if self.result.success:
            winner = self.result.selected
            selected = {
                "candidate_id": winner.candidate_id,
                "candidate_name": winner.candidate_name,
                "score": winner.score,
                "reasons": {k.value: v for k, v in winner.reasons.items()},
                "summary": winner.summary,
                "why_selected": self.result.explanation,
            }
        return {
            "kind": self.kind.value,
            "request_id": self.request_id,
            "subject_id": self.subject_id,
            "amount": self.amount,
            "amount_tier": self.amount_tier.value,
            "candidates_count": self.candidates_count,
            "candidates": [c.to_dict() for c in self.candidates],
            "selected": selected,
            "success": self.result.success,
            "error": self.result.error,
            "error_kind": self.result.error_kind.value if self.result.error_kind else None,
            "attempts": [a.to_dict() for a in self.result.attempts],
            "total_attempts": self.result.total_attempts,
            "config": self.config,
            "timestamp": self.timestamp.isoformat(),
        }
