"""Tests for the ORM → domain mappers."""

import logging
from datetime import datetime

from payroute.adapters.persistence.models import (
    AssignmentRecordModel,
    BankHealthModel,
    CollectionEndpointModel,
    SettlementAgentModel,
)
from payroute.adapters.persistence.repositories import (
    _agent_to_domain,
    _bank_health_to_domain,
    _endpoint_to_domain,
    _record_to_domain,
)
from payroute.domain.value_objects.enums import (
    AgentPriority,
    AmountTier,
    AssignmentStatus,
    BankStatus,
    CandidateKind,
)


def test_endpoint_mapper():
    m = CollectionEndpointModel(
        id="ep-1", name="Shop", address="shop@okaxis", owner_agent_id="ag-1",
        is_active=None, active=True, amount_tier="high", min_amount=None,
        max_amount=75_000.0, daily_volume_limit=200_000.0, max_active_workload=3,
    )
    e = _endpoint_to_domain(m)
    assert e.amount_tier == AmountTier.HIGH
    assert e.bank == "axis"
    assert e.is_available()
    assert e.stats is None
    assert e.max_amount == 75_000.0


def test_agent_mapper():
    m = SettlementAgentModel(
        id="ag-1", name="Ravi", is_active=True, active=None, is_online=True,
        last_active_at=datetime(2026, 10, 19, 11, 58), priority="high",
        balance=None, max_active_workload=None,
    )
    a = _agent_to_domain(m)
    assert a.priority == AgentPriority.HIGH
    assert a.balance == 0.0
    assert a.max_active_workload is None


def test_record_mapper():
    m = AssignmentRecordModel(
        id=5, kind="payout", candidate_id="ag-1", status="completed", amount=1200.0,
        assigned_at=datetime(2026, 10, 19, 9, 0), completed_at=datetime(2026, 10, 19, 9, 7),
    )
    r = _record_to_domain(m)
    assert r.kind == CandidateKind.SETTLEMENT_AGENT
    assert r.status == AssignmentStatus.COMPLETED


def test_bank_health_mapper_skips_malformed_windows():
    m = BankHealthModel(
        bank="sbi",
        status="degraded",
        maintenance_windows=[
            {"day": "sunday", "start": "01:00", "end": "03:00"},
            {"start": "23:00", "end": "23:30"},
            {"day": "monday"},
        ],
    )
    h = _bank_health_to_domain(m)
    assert h.status == BankStatus.DEGRADED
    assert [(w.day, w.start) for w in h.maintenance_windows] == [
        ("sunday", "01:00"),
        ("daily", "23:00"),
    ]


def test_unknown_enum_values_fall_back_to_defaults(caplog):
    with caplog.at_level(logging.WARNING):
        health = _bank_health_to_domain(
            BankHealthModel(bank="hdfc", status="flaky", maintenance_windows=None)
        )
        endpoint = _endpoint_to_domain(
            CollectionEndpointModel(
                id="ep-2", name="Shop", address="s@okhdfcbank", amount_tier="jumbo"
            )
        )
        agent = _agent_to_domain(SettlementAgentModel(id="ag-2", name="Asha", priority="vip"))

    assert health.status == BankStatus.HEALTHY
    assert endpoint.amount_tier == AmountTier.MEDIUM
    assert agent.priority == AgentPriority.NORMAL
    assert "Unknown BankStatus 'flaky' on hdfc" in caplog.text
