"""Candidate entities — collection endpoints (payin) and settlement agents (payout).

Both expose the same capability surface used by the selection engine:
``id``, ``name``, ``is_available()``, ``stats`` and the per-candidate limits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.value_objects.bank_handle import extract_bank
from payroute.domain.value_objects.enums import AgentPriority, AmountTier


class Candidate(Protocol):
    id: str
    name: str
    is_active: bool | None
    active: bool | None
    max_active_workload: int | None
    stats: UsageStats | None

    def is_available(self) -> bool:
        ...


def _flags_allow(is_active: bool | None, active: bool | None) -> bool:
    # Either flag set to False disables; the legacy flag decides only when the primary is unset
    if is_active is False or active is False:
        return False
    if is_active is not None:
        return is_active
    return bool(active)


@dataclass
class CollectionEndpoint:
    id: str
    name: str
    address: str
    owner_agent_id: str | None = None
    is_active: bool | None = None
    active: bool | None = None
    amount_tier: AmountTier = AmountTier.MEDIUM
    min_amount: float | None = None
    max_amount: float | None = None
    daily_volume_limit: float | None = None
    max_active_workload: int | None = None
    stats: UsageStats | None = None

    @property
    def bank(self) -> str:
        return extract_bank(self.address)

    def is_available(self) -> bool:
        return _flags_allow(self.is_active, self.active)


@dataclass
class SettlementAgent:
    id: str
    name: str
    is_active: bool | None = None
    active: bool | None = None
    is_online: bool = False
    last_active_at: datetime | None = None
    priority: AgentPriority = AgentPriority.NORMAL
    balance: float = 0.0
    max_active_workload: int | None = None
    stats: UsageStats | None = None

    def is_available(self) -> bool:
        return _flags_allow(self.is_active, self.active)

    def minutes_inactive(self, now: datetime) -> float | None:
        if self.last_active_at is None:
            return None
        return (now - self.last_active_at).total_seconds() / 60
