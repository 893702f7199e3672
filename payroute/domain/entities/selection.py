"""Selection entities — scored candidates, attempts and the engine's result."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from payroute.domain.entities.bank_health import BankHealth
from payroute.domain.entities.candidate import Candidate
from payroute.domain.value_objects.enums import ScoreFactor, SelectionErrorKind


@dataclass(frozen=True)
class FactorScore:
    """One factor's contribution to a candidate's score."""

    factor: ScoreFactor
    points: float
    reason: str


@dataclass
class ScoredCandidate:
    candidate: Candidate
    score: int
    factors: list[FactorScore]
    summary: str

    @property
    def candidate_id(self) -> str:
        return self.candidate.id

    @property
    def candidate_name(self) -> str:
        return self.candidate.name

    @property
    def breakdown(self) -> dict[ScoreFactor, float]:
        return {f.factor: f.points for f in self.factors}

    @property
    def reasons(self) -> dict[ScoreFactor, str]:
        return {f.factor: f.reason for f in self.factors}

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "score": self.score,
            "breakdown": {k.value: round(v, 2) for k, v in self.breakdown.items()},
            "reasons": {k.value: v for k, v in self.reasons.items()},
            "summary": self.summary,
        }


@dataclass
class ScoringContext:
    """Point-in-time facts shared by all candidates of one run."""

    now: datetime
    owner_balances: dict[str, float] = field(default_factory=dict)
    bank_health: dict[str, BankHealth] = field(default_factory=dict)


@dataclass(frozen=True)
class Validation:
    valid: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> Validation:
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: str) -> Validation:
        return cls(valid=False, reason=reason)


@dataclass(frozen=True)
class SelectionAttempt:
    attempt: int
    candidate_id: str
    candidate_name: str
    score: int
    valid: bool
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt,
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "score": self.score,
            "valid": self.valid,
            "reason": self.reason,
        }


@dataclass
class SelectionResult:
    """Outcome of one selection. ``selected`` is set iff ``success`` is true."""

    success: bool
    selected: ScoredCandidate | None = None
    attempts: list[SelectionAttempt] = field(default_factory=list)
    error: str | None = None
    error_kind: SelectionErrorKind | None = None
    explanation: str | None = None

    def __post_init__(self) -> None:
        if self.success != (self.selected is not None):
            raise ValueError("selected must be set exactly when success is true")

    @property
    def total_attempts(self) -> int:
        return len(self.attempts)

    @classmethod
    def failure(
        cls,
        kind: SelectionErrorKind,
        error: str,
        attempts: list[SelectionAttempt] | None = None,
    ) -> SelectionResult:
        return cls(success=False, attempts=list(attempts or []), error=error, error_kind=kind)

    def to_dict(self) -> dict[str, Any]:
        """The contract returned to callers of the engine."""
        trail = [a.to_dict() for a in self.attempts]
        if self.success:
            return {
                "success": True,
                "candidate_id": self.selected.candidate_id,
                "candidate_name": self.selected.candidate_name,
                "score": self.selected.score,
                "summary": self.selected.summary,
                "reasons": {k.value: v for k, v in self.selected.reasons.items()},
                "explanation": self.explanation,
                "attempts": self.total_attempts,
                "attempt_trail": trail,
            }
        return {
            "success": False,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "attempts": self.total_attempts,
            "attempt_trail": trail,
        }
