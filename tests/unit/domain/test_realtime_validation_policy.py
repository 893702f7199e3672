"""Tests for RealtimeValidationPolicy."""

from dataclasses import replace
from datetime import timedelta

from conftest import FIXED_NOW
from payroute.domain.entities.candidate import CollectionEndpoint, SettlementAgent
from payroute.domain.entities.engine_config import default_payin_config, default_payout_config
from payroute.domain.entities.selection import ScoredCandidate
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.realtime_validation import (
    validate_endpoint_realtime,
    validate_realtime,
)


def _agent(stats: UsageStats | None = None, **kw) -> ScoredCandidate:
    kw.setdefault("is_active", True)
    agent = SettlementAgent(id="ag-1", name="Agent One", stats=stats or UsageStats(), **kw)
    return ScoredCandidate(candidate=agent, score=80, factors=[], summary="")


def _endpoint(stats: UsageStats | None = None, **kw) -> ScoredCandidate:
    kw.setdefault("is_active", True)
    endpoint = CollectionEndpoint(
        id="ep-1", name="Endpoint One", address="shop@oksbi",
        stats=stats or UsageStats(), **kw,
    )
    return ScoredCandidate(candidate=endpoint, score=80, factors=[], summary="")


PAYOUT = default_payout_config()
PAYIN = default_payin_config()


def test_fresh_agent_is_valid():
    v = validate_realtime(_agent(), 1000, PAYOUT, FIXED_NOW, "Agent")
    assert v.valid
    assert v.reason is None


def test_inactive_agent_rejected():
    v = validate_realtime(_agent(is_active=False), 1000, PAYOUT, FIXED_NOW, "Agent")
    assert not v.valid
    assert v.reason == "Agent is inactive"


def test_primary_false_rejects_despite_legacy_flag():
    v = validate_realtime(_agent(is_active=False, active=True), 1000, PAYOUT, FIXED_NOW, "Agent")
    assert v.reason == "Agent is inactive"


def test_legacy_false_rejects_despite_primary_flag():
    v = validate_realtime(_agent(is_active=True, active=False), 1000, PAYOUT, FIXED_NOW, "Agent")
    assert not v.valid
    assert v.reason == "Agent is inactive"


def test_endpoint_with_conflicting_flags_rejected():
    v = validate_endpoint_realtime(_endpoint(is_active=True, active=False), 1000, PAYIN, FIXED_NOW)
    assert v.reason == "Endpoint is inactive"


def test_legacy_flag_used_when_primary_unset():
    v = validate_realtime(_agent(is_active=None, active=True), 1000, PAYOUT, FIXED_NOW, "Agent")
    assert v.valid


def test_at_capacity_rejected():
    v = validate_realtime(_agent(UsageStats(active_workload=10)), 1000, PAYOUT, FIXED_NOW)
    assert v.reason == "At max capacity (10/10 active)"


def test_candidate_capacity_overrides_config():
    scored = _agent(UsageStats(active_workload=2), max_active_workload=2)
    v = validate_realtime(scored, 1000, PAYOUT, FIXED_NOW)
    assert v.reason == "At max capacity (2/2 active)"


def test_zero_capacity_is_respected():
    scored = _agent(UsageStats(), max_active_workload=0)
    v = validate_realtime(scored, 1000, PAYOUT, FIXED_NOW)
    assert v.reason == "At max capacity (0/0 active)"


def test_daily_count_rejected():
    v = validate_realtime(_agent(UsageStats(today_count=100)), 1000, PAYOUT, FIXED_NOW)
    assert v.reason == "Daily limit reached (100/100)"


def test_too_many_cancels_rejected():
    v = validate_realtime(_agent(UsageStats(today_cancelled=5)), 1000, PAYOUT, FIXED_NOW)
    assert v.reason == "Too many cancels today (5)"


def test_cooldown_allows_after_half_the_window():
    """cooldown 2min: 0.5min idle is rejected, 1.0min idle passes."""
    config = replace(PAYIN, cooldown_minutes=2)

    recent = UsageStats(last_assigned_at=FIXED_NOW - timedelta(seconds=30))
    v = validate_realtime(_agent(recent), 1000, config, FIXED_NOW)
    assert v.reason == "Still in cooldown (0.5min idle)"

    rested = UsageStats(last_assigned_at=FIXED_NOW - timedelta(minutes=1))
    assert validate_realtime(_agent(rested), 1000, config, FIXED_NOW).valid


def test_first_failing_check_wins():
    stats = UsageStats(active_workload=10, today_count=100, today_cancelled=9)
    v = validate_realtime(_agent(stats), 1000, PAYOUT, FIXED_NOW)
    assert v.reason.startswith("At max capacity")


def test_endpoint_daily_volume_rejected():
    scored = _endpoint(UsageStats(today_volume=98_000))
    v = validate_endpoint_realtime(scored, 5000, PAYIN, FIXED_NOW)
    assert v.reason == "Would exceed daily limit (98000 + 5000 > 100000)"


def test_endpoint_own_daily_limit_used():
    scored = _endpoint(UsageStats(today_volume=9_000), daily_volume_limit=10_000)
    v = validate_endpoint_realtime(scored, 2000, PAYIN, FIXED_NOW)
    assert v.reason == "Would exceed daily limit (9000 + 2000 > 10000)"


def test_endpoint_amount_below_minimum():
    v = validate_endpoint_realtime(_endpoint(), 100, PAYIN, FIXED_NOW)
    assert v.reason == "Amount below minimum (100 < 500)"


def test_endpoint_amount_above_maximum():
    v = validate_endpoint_realtime(_endpoint(max_amount=20_000), 25_000, PAYIN, FIXED_NOW)
    assert v.reason == "Amount above maximum (25000 > 20000)"


def test_endpoint_shared_checks_use_endpoint_label():
    v = validate_endpoint_realtime(_endpoint(is_active=False), 1000, PAYIN, FIXED_NOW)
    assert v.reason == "Endpoint is inactive"


def test_endpoint_within_limits_is_valid():
    assert validate_endpoint_realtime(_endpoint(), 5000, PAYIN, FIXED_NOW).valid
