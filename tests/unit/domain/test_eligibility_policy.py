"""Tests for EndpointEligibilityPolicy."""

from datetime import timedelta

import pytest

from conftest import FIXED_NOW
from payroute.domain.entities.candidate import CollectionEndpoint, SettlementAgent
from payroute.domain.entities.engine_config import default_payin_config, default_payout_config
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.eligibility import endpoint_can_take, prefilter_endpoints
from payroute.domain.policies.rules import PAYIN_RULES, PAYOUT_RULES

PAYIN = default_payin_config()


def _endpoint(eid: str = "ep-1", stats: UsageStats | None = None, **kw) -> CollectionEndpoint:
    return CollectionEndpoint(
        id=eid, name=eid, address=f"{eid}@oksbi", is_active=True, stats=stats, **kw
    )


@pytest.mark.parametrize(
    "amount,expected",
    [(499, False), (500, True), (50_000, True), (50_001, False)],
)
def test_config_bounds_apply_when_endpoint_has_none(amount, expected):
    assert endpoint_can_take(_endpoint(), amount, PAYIN, FIXED_NOW) is expected


def test_endpoint_bounds_override_config():
    endpoint = _endpoint(min_amount=2_000, max_amount=3_000)
    assert not endpoint_can_take(endpoint, 1_000, PAYIN, FIXED_NOW)
    assert endpoint_can_take(endpoint, 2_500, PAYIN, FIXED_NOW)
    assert not endpoint_can_take(endpoint, 5_000, PAYIN, FIXED_NOW)


def test_daily_headroom_required():
    stats = UsageStats(today_volume=97_000)
    assert endpoint_can_take(_endpoint(stats=stats), 3_000, PAYIN, FIXED_NOW)
    assert not endpoint_can_take(_endpoint(stats=stats), 3_001, PAYIN, FIXED_NOW)


def test_zero_daily_limit_excludes_everything():
    assert not endpoint_can_take(_endpoint(daily_volume_limit=0), 500, PAYIN, FIXED_NOW)


def test_half_cooldown_must_have_passed():
    recent = UsageStats(last_assigned_at=FIXED_NOW - timedelta(seconds=50))
    rested = UsageStats(last_assigned_at=FIXED_NOW - timedelta(minutes=1))
    assert not endpoint_can_take(_endpoint(stats=recent), 1_000, PAYIN, FIXED_NOW)
    assert endpoint_can_take(_endpoint(stats=rested), 1_000, PAYIN, FIXED_NOW)


def test_prefilter_keeps_order():
    endpoints = [_endpoint("a"), _endpoint("b", max_amount=900), _endpoint("c")]
    kept = prefilter_endpoints(endpoints, 1_000, PAYIN, FIXED_NOW)
    assert [e.id for e in kept] == ["a", "c"]


def test_rules_apply_prefilter_only_for_endpoints():
    endpoints = [_endpoint("a", max_amount=900)]
    agents = [SettlementAgent(id="ag", name="ag", is_active=True)]
    assert PAYIN_RULES.eligible(endpoints, 1_000, PAYIN, FIXED_NOW) == []
    assert PAYOUT_RULES.eligible(agents, 10_000_000, default_payout_config(), FIXED_NOW) is agents
