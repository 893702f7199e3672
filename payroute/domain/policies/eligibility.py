"""EndpointEligibilityPolicy — drop endpoints that cannot take the amount at all.

Runs before scoring so that a high-scoring endpoint whose limits exclude the
amount never consumes a draw. Real-time validation repeats these checks at
draw time.
"""

from __future__ import annotations

from datetime import datetime

from payroute.domain.entities.candidate import CollectionEndpoint
from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.realtime_validation import COOLDOWN_ALLOWANCE, _or_default


def endpoint_can_take(
    endpoint: CollectionEndpoint, amount: float, config: EngineConfig, now: datetime
) -> bool:
    stats = endpoint.stats or UsageStats.zeroed()

    minimum = _or_default(endpoint.min_amount, config.default_min_amount)
    maximum = _or_default(endpoint.max_amount, config.default_max_amount)
    if not minimum <= amount <= maximum:
        return False

    daily_limit = _or_default(endpoint.daily_volume_limit, config.default_daily_volume_limit)
    if stats.today_volume + amount > daily_limit:
        return False

    idle = stats.minutes_idle(now)
    return idle is None or idle >= config.cooldown_minutes * COOLDOWN_ALLOWANCE


def prefilter_endpoints(
    endpoints: list[CollectionEndpoint],
    amount: float,
    config: EngineConfig,
    now: datetime,
) -> list[CollectionEndpoint]:
    """Endpoints whose per-transaction bounds, daily headroom and cooldown admit ``amount``."""
    return [e for e in endpoints if endpoint_can_take(e, amount, config, now)]
