"""EndpointScoringPolicy — how suitable a collection endpoint is for a payin.

Factors (weights from config):
  success rate, daily-limit headroom, cooldown recovery, amount-tier match,
  owner balance, bank health, maintenance window; then fixed penalties for
  recent failures and heavy daily use.
"""

from __future__ import annotations

import random

from payroute.domain.entities.candidate import CollectionEndpoint
from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import FactorScore, ScoredCandidate, ScoringContext
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.amount_tier import get_amount_tier
from payroute.domain.policies.scoring import DEFAULT_SUCCESS_RATE, finalize
from payroute.domain.value_objects.enums import BankStatus, ScoreFactor

BANK_STATUS_MULTIPLIER = {
    BankStatus.HEALTHY: 1.0,
    BankStatus.DEGRADED: 0.5,
    BankStatus.DOWN: 0.1,
}


def score_endpoint(
    endpoint: CollectionEndpoint,
    amount: float,
    context: ScoringContext,
    config: EngineConfig,
    rng: random.Random,
) -> ScoredCandidate:
    stats = endpoint.stats or UsageStats.zeroed()
    factors: list[FactorScore] = []
    strengths: list[str] = []
    concerns: list[str] = []

    # 1. Success rate
    w = config.weight(ScoreFactor.SUCCESS_RATE)
    rate = stats.success_rate
    if rate is None:
        points = DEFAULT_SUCCESS_RATE / 100 * w
        reason = f"No transaction history yet (default {DEFAULT_SUCCESS_RATE:.0f}%) → {points:.1f}pts"
    else:
        points = rate / 100 * w
        if rate >= 95:
            label = "Excellent"
            strengths.append("high success rate")
        elif rate >= 80:
            label = "Good"
        else:
            label = "Low"
            concerns.append("low success rate")
        reason = (
            f"{label} {rate:.0f}% success "
            f"({stats.total_completed}/{stats.total_attempted}) → {points:.1f}pts"
        )
    factors.append(FactorScore(ScoreFactor.SUCCESS_RATE, points, reason))

    # 2. Daily limit headroom
    w = config.weight(ScoreFactor.DAILY_LIMIT_HEADROOM)
    limit = config.default_daily_volume_limit if endpoint.daily_volume_limit is None else endpoint.daily_volume_limit
    headroom = max(0.0, limit - stats.today_volume)
    if headroom < amount:
        points = 0.0
        reason = f"Only {headroom:.0f} left of {limit:.0f} daily limit, cannot fit {amount:.0f} → 0pts"
        concerns.append("daily limit nearly used")
    else:
        capacity_left = headroom / limit if limit else 0.0
        points = capacity_left * w
        reason = f"{capacity_left * 100:.0f}% of daily limit left ({headroom:.0f}/{limit:.0f}) → {points:.1f}pts"
        if capacity_left >= 0.8:
            strengths.append("plenty of daily headroom")
    factors.append(FactorScore(ScoreFactor.DAILY_LIMIT_HEADROOM, points, reason))

    # 3. Cooldown recovery
    w = config.weight(ScoreFactor.COOLDOWN)
    idle = stats.minutes_idle(context.now)
    if idle is None or config.cooldown_minutes <= 0:
        recovery = 1.0
        reason_idle = "never used" if idle is None else f"idle {idle:.0f}min"
    else:
        recovery = min(idle / config.cooldown_minutes, 1.0)
        reason_idle = f"idle {idle:.1f}min of {config.cooldown_minutes:g}min cooldown"
    points = recovery * w
    factors.append(
        FactorScore(ScoreFactor.COOLDOWN, points, f"Cooldown {recovery * 100:.0f}% recovered, {reason_idle} → {points:.1f}pts")
    )

    # 4. Amount tier match
    w = config.weight(ScoreFactor.AMOUNT_MATCH)
    requested = get_amount_tier(amount, config)
    if requested == endpoint.amount_tier:
        points = w * 1.0
        reason = f"Tier match, endpoint serves {requested.value} amounts → {points:.1f}pts"
        strengths.append("amount tier match")
    else:
        points = w * 0.4
        reason = (
            f"Tier mismatch, endpoint serves {endpoint.amount_tier.value}, "
            f"this is {requested.value} → {points:.1f}pts"
        )
    factors.append(FactorScore(ScoreFactor.AMOUNT_MATCH, points, reason))

    # 5. Owner balance: the owning agent only needs a non-negative balance
    w = config.weight(ScoreFactor.OWNER_BALANCE)
    balance = context.owner_balances.get(endpoint.owner_agent_id or "", 0.0)
    if balance >= 0:
        points = w
        reason = f"Owner balance {balance:.0f} is settled → {points:.1f}pts"
    else:
        points = 0.0
        reason = f"Owner balance negative ({balance:.0f}) → 0pts"
        concerns.append("owner in debt")
    factors.append(FactorScore(ScoreFactor.OWNER_BALANCE, points, reason))

    # 6. Bank health
    w = config.weight(ScoreFactor.BANK_HEALTH)
    bank = endpoint.bank
    health = context.bank_health.get(bank)
    status = health.status if health else BankStatus.HEALTHY
    points = BANK_STATUS_MULTIPLIER[status] * w
    factors.append(
        FactorScore(ScoreFactor.BANK_HEALTH, points, f"Bank {bank} is {status.value} → {points:.1f}pts")
    )
    if status != BankStatus.HEALTHY:
        concerns.append(f"bank {status.value}")

    # 7. Maintenance window
    w = config.weight(ScoreFactor.TIME_WINDOW)
    if health is not None and health.in_maintenance(context.now):
        points = 0.0
        reason = f"Bank {bank} is inside a maintenance window → 0pts"
        concerns.append("bank maintenance")
    else:
        points = w
        reason = f"No maintenance scheduled now → {points:.1f}pts"
    factors.append(FactorScore(ScoreFactor.TIME_WINDOW, points, reason))

    # Penalties
    penalty = 0.0
    notes: list[str] = []
    if stats.recent_failures >= 3:
        penalty -= 30
    elif stats.recent_failures >= 2:
        penalty -= 15
    elif stats.recent_failures >= 1:
        penalty -= 5
    if stats.recent_failures:
        notes.append(f"{stats.recent_failures} failures in the last hour")
        concerns.append("recent failures")

    if stats.today_count > config.max_daily_count * 0.9:
        penalty -= 20
        notes.append(f"almost at daily count ({stats.today_count}/{config.max_daily_count})")
    elif stats.today_count > config.max_daily_count * 0.7:
        penalty -= 10
        notes.append(f"busy today ({stats.today_count}/{config.max_daily_count})")

    if notes:
        reason = f"Penalties: {', '.join(notes)} → {penalty:.0f}pts"
    else:
        reason = "No penalties → 0pts"
    factors.append(FactorScore(ScoreFactor.PENALTIES, penalty, reason))

    return finalize(endpoint, factors, strengths, concerns, config, rng)
