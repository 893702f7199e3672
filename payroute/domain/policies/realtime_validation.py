"""RealtimeValidationPolicy — re-check a drawn candidate against hard limits.

Runs at draw time rather than scoring time: counters may have moved since the
snapshot was scored. Checks run in order and the first failure wins; each
failure carries the reason recorded verbatim in the attempt trail.
"""

from __future__ import annotations

from datetime import datetime

from payroute.domain.entities.candidate import CollectionEndpoint
from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import ScoredCandidate, Validation
from payroute.domain.entities.usage_stats import UsageStats

# A candidate becomes selectable again once half its cooldown has elapsed
COOLDOWN_ALLOWANCE = 0.5


def _or_default(value, default):
    return default if value is None else value


def validate_realtime(
    scored: ScoredCandidate,
    amount: float,
    config: EngineConfig,
    now: datetime,
    label: str = "Candidate",
) -> Validation:
    """Checks shared by every candidate kind.

    1. Still active (neither flag False, legacy flag when the primary is unset).
    2. Active workload below capacity.
    3. Today's count below the daily ceiling.
    4. Today's cancellations below the tolerance.
    5. Idle for at least half the cooldown window.
    """
    candidate = scored.candidate
    stats = candidate.stats or UsageStats.zeroed()

    if not candidate.is_available():
        return Validation.reject(f"{label} is inactive")

    capacity = _or_default(candidate.max_active_workload, config.max_active_workload)
    if stats.active_workload >= capacity:
        return Validation.reject(
            f"At max capacity ({stats.active_workload}/{capacity} active)"
        )

    if stats.today_count >= config.max_daily_count:
        return Validation.reject(
            f"Daily limit reached ({stats.today_count}/{config.max_daily_count})"
        )

    if stats.today_cancelled >= config.cancel_threshold:
        return Validation.reject(f"Too many cancels today ({stats.today_cancelled})")

    idle = stats.minutes_idle(now)
    if idle is not None and idle < config.cooldown_minutes * COOLDOWN_ALLOWANCE:
        return Validation.reject(f"Still in cooldown ({idle:.1f}min idle)")

    return Validation.ok()


def validate_endpoint_realtime(
    scored: ScoredCandidate,
    amount: float,
    config: EngineConfig,
    now: datetime,
    label: str = "Endpoint",
) -> Validation:
    """Shared checks plus the endpoint's monetary limits.

    6. Today's volume plus this amount stays within the daily limit, and the
       amount sits inside the per-transaction bounds.
    """
    verdict = validate_realtime(scored, amount, config, now, label)
    if not verdict.valid:
        return verdict

    endpoint: CollectionEndpoint = scored.candidate
    stats = endpoint.stats or UsageStats.zeroed()

    daily_limit = _or_default(endpoint.daily_volume_limit, config.default_daily_volume_limit)
    if stats.today_volume + amount > daily_limit:
        return Validation.reject(
            f"Would exceed daily limit ({stats.today_volume:.0f} + {amount:.0f} > {daily_limit:.0f})"
        )

    minimum = _or_default(endpoint.min_amount, config.default_min_amount)
    if amount < minimum:
        return Validation.reject(f"Amount below minimum ({amount:.0f} < {minimum:.0f})")

    maximum = _or_default(endpoint.max_amount, config.default_max_amount)
    if amount > maximum:
        return Validation.reject(f"Amount above maximum ({amount:.0f} > {maximum:.0f})")

    return Validation.ok()
