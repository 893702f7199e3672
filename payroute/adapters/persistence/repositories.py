"""SQLAlchemy repository implementations.

Candidate and config access is read-only; the selection log is append-only.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from payroute.adapters.persistence.models import (
    AssignmentRecordModel,
    BankHealthModel,
    CollectionEndpointModel,
    EngineConfigModel,
    SelectionLogModel,
    SettlementAgentModel,
)
from payroute.application.ports.candidate_repo import C, CandidateRepository
from payroute.application.ports.config_source import EngineConfigSource
from payroute.application.ports.selection_log_sink import SelectionLogSink
from payroute.domain.entities.assignment_record import AssignmentRecord
from payroute.domain.entities.bank_health import BankHealth
from payroute.domain.entities.candidate import CollectionEndpoint, SettlementAgent
from payroute.domain.entities.selection import ScoringContext
from payroute.domain.entities.selection_log import SelectionLogEntry
from payroute.domain.value_objects.enums import (
    AgentPriority,
    AmountTier,
    AssignmentStatus,
    BankStatus,
    CandidateKind,
)
from payroute.domain.value_objects.maintenance_window import DAILY, MaintenanceWindow

logger = logging.getLogger(__name__)

E = TypeVar("E", AmountTier, AgentPriority, BankStatus)

# ─── Mappers ─────────────────────────────────────────────────────────


def _enum_or(enum_cls: type[E], raw: Any, default: E, owner: str) -> E:
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning("Unknown %s %r on %s, using %s", enum_cls.__name__, raw, owner, default.value)
        return default


def _endpoint_to_domain(m: CollectionEndpointModel) -> CollectionEndpoint:
    return CollectionEndpoint(
        id=m.id,
        name=m.name,
        address=m.address,
        owner_agent_id=m.owner_agent_id,
        is_active=m.is_active,
        active=m.active,
        amount_tier=_enum_or(AmountTier, m.amount_tier, AmountTier.MEDIUM, m.id),
        min_amount=m.min_amount,
        max_amount=m.max_amount,
        daily_volume_limit=m.daily_volume_limit,
        max_active_workload=m.max_active_workload,
    )


def _agent_to_domain(m: SettlementAgentModel) -> SettlementAgent:
    return SettlementAgent(
        id=m.id,
        name=m.name,
        is_active=m.is_active,
        active=m.active,
        is_online=m.is_online,
        last_active_at=m.last_active_at,
        priority=_enum_or(AgentPriority, m.priority, AgentPriority.NORMAL, m.id),
        balance=m.balance or 0.0,
        max_active_workload=m.max_active_workload,
    )


def _record_to_domain(m: AssignmentRecordModel) -> AssignmentRecord:
    return AssignmentRecord(
        id=m.id,
        kind=CandidateKind(m.kind),
        candidate_id=m.candidate_id,
        status=AssignmentStatus(m.status),
        amount=m.amount,
        assigned_at=m.assigned_at,
        completed_at=m.completed_at,
        cancelled_at=m.cancelled_at,
        failed_at=m.failed_at,
    )


def _window_to_domain(raw: dict[str, Any]) -> MaintenanceWindow | None:
    if not raw.get("start") or not raw.get("end"):
        return None
    return MaintenanceWindow(day=raw.get("day") or DAILY, start=raw["start"], end=raw["end"])


def _bank_health_to_domain(m: BankHealthModel) -> BankHealth:
    windows = [_window_to_domain(w) for w in (m.maintenance_windows or [])]
    return BankHealth(
        bank=m.bank,
        status=_enum_or(BankStatus, m.status, BankStatus.HEALTHY, m.bank),
        maintenance_windows=[w for w in windows if w is not None],
    )


# ─── Repositories ────────────────────────────────────────────────────


class _SqlCandidateRepository(CandidateRepository[C]):
    kind: CandidateKind

    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_assignment_records(self, candidate_id: str) -> list[AssignmentRecord]:
        result = await self._s.execute(
            select(AssignmentRecordModel)
            .where(
                AssignmentRecordModel.kind == self.kind.value,
                AssignmentRecordModel.candidate_id == candidate_id,
            )
            .order_by(AssignmentRecordModel.assigned_at)
        )
        return [_record_to_domain(m) for m in result.scalars().all()]

    async def _fetch_active(self, model) -> list:
        result = await self._s.execute(
            select(model)
            .where(
                model.is_active.is_(True),
                or_(model.active.is_(None), model.active.is_(True)),
            )
            .order_by(model.id)
        )
        rows = list(result.scalars().all())
        if rows:
            return rows

        # Rows written before the is_active column existed only carry the legacy flag
        result = await self._s.execute(
            select(model)
            .where(
                model.active.is_(True),
                or_(model.is_active.is_(None), model.is_active.is_(True)),
            )
            .order_by(model.id)
        )
        return list(result.scalars().all())


class SqlEndpointRepository(_SqlCandidateRepository[CollectionEndpoint]):
    kind = CandidateKind.COLLECTION_ENDPOINT

    async def fetch_eligible(self, amount: float) -> list[CollectionEndpoint]:
        return [_endpoint_to_domain(m) for m in await self._fetch_active(CollectionEndpointModel)]

    async def fetch_context(
        self, candidates: list[CollectionEndpoint], now: datetime
    ) -> ScoringContext:
        owner_ids = {c.owner_agent_id for c in candidates if c.owner_agent_id}
        banks = {c.bank for c in candidates}

        balances: dict[str, float] = {}
        if owner_ids:
            result = await self._s.execute(
                select(SettlementAgentModel.id, SettlementAgentModel.balance).where(
                    SettlementAgentModel.id.in_(owner_ids)
                )
            )
            balances = {row.id: row.balance or 0.0 for row in result}

        result = await self._s.execute(
            select(BankHealthModel).where(BankHealthModel.bank.in_(banks))
        )
        health = {m.bank: _bank_health_to_domain(m) for m in result.scalars().all()}

        return ScoringContext(now=now, owner_balances=balances, bank_health=health)


class SqlAgentRepository(_SqlCandidateRepository[SettlementAgent]):
    kind = CandidateKind.SETTLEMENT_AGENT

    async def fetch_eligible(self, amount: float) -> list[SettlementAgent]:
        return [_agent_to_domain(m) for m in await self._fetch_active(SettlementAgentModel)]


class SqlEngineConfigSource(EngineConfigSource):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def load_overrides(self, kind: CandidateKind) -> dict[str, Any] | None:
        m = await self._s.get(EngineConfigModel, kind.value)
        return dict(m.overrides) if m and m.overrides else None


class SqlSelectionLogSink(SelectionLogSink):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def record(self, entry: SelectionLogEntry) -> None:
        result = entry.result
        m = SelectionLogModel(
            kind=entry.kind.value,
            request_id=entry.request_id,
            subject_id=entry.subject_id,
            amount=entry.amount,
            amount_tier=entry.amount_tier.value,
            candidates_count=entry.candidates_count,
            success=result.success,
            selected_id=result.selected.candidate_id if result.selected else None,
            error=result.error,
            total_attempts=result.total_attempts,
            payload=entry.to_dict(),
            created_at=entry.timestamp,
        )
        self._s.add(m)
        await self._s.flush()
