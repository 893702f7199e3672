"""Port interface for candidate lookup and usage statistics."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, TypeVar

from payroute.domain.entities.assignment_record import AssignmentRecord
from payroute.domain.entities.candidate import Candidate
from payroute.domain.entities.selection import ScoringContext
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.usage_aggregation import aggregate_usage

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Candidate)


class CandidateRepository(ABC, Generic[C]):
    @abstractmethod
    async def fetch_eligible(self, amount: float) -> list[C]:
        """Active candidates; falls back to the legacy flag when none are found."""
        ...

    @abstractmethod
    async def get_assignment_records(self, candidate_id: str) -> list[AssignmentRecord]:
        ...

    async def fetch_context(self, candidates: list[C], now: datetime) -> ScoringContext:
        return ScoringContext(now=now)

    async def enrich(self, candidates: list[C], now: datetime) -> list[C]:
        """Fill missing ``stats`` from assignment records.

        A candidate whose records cannot be read gets zeroed stats and stays
        in the pool.
        """
        for candidate in candidates:
            if candidate.stats is not None:
                continue
            try:
                records = await self.get_assignment_records(candidate.id)
                candidate.stats = aggregate_usage(records, now)
            except Exception as e:
                logger.warning("Failed to enrich stats for %s: %s", candidate.id, e)
                candidate.stats = UsageStats.zeroed()
        return candidates
