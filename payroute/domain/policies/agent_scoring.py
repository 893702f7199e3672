"""AgentScoringPolicy — how suitable a settlement agent is for a payout.

Every factor returns a reason string explaining its points, so the
selection log can show why one agent beat another.
"""

from __future__ import annotations

import random

from payroute.domain.entities.candidate import SettlementAgent
from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.entities.selection import FactorScore, ScoredCandidate, ScoringContext
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.policies.amount_tier import get_amount_tier
from payroute.domain.policies.scoring import DEFAULT_SUCCESS_RATE, finalize
from payroute.domain.value_objects.enums import AgentPriority, ScoreFactor

PRIORITY_MULTIPLIER = {
    AgentPriority.HIGH: 1.0,
    AgentPriority.NORMAL: 0.6,
    AgentPriority.LOW: 0.2,
}

# Assumed speed share for agents with no completed payouts yet
NEW_AGENT_SPEED_SHARE = 0.6


def score_agent(
    agent: SettlementAgent,
    amount: float,
    context: ScoringContext,
    config: EngineConfig,
    rng: random.Random,
) -> ScoredCandidate:
    stats = agent.stats or UsageStats.zeroed()
    factors: list[FactorScore] = []
    strengths: list[str] = []
    concerns: list[str] = []

    # 1. Success rate
    w = config.weight(ScoreFactor.SUCCESS_RATE)
    rate = stats.success_rate
    done, tried = stats.total_completed, stats.total_attempted
    if rate is None:
        points = DEFAULT_SUCCESS_RATE / 100 * w
        reason = f"New agent, no history yet (default {DEFAULT_SUCCESS_RATE:.0f}%) → {points:.1f}pts"
    else:
        points = rate / 100 * w
        if rate >= 95:
            reason = f"Excellent {rate:.0f}% success ({done}/{tried}) → {points:.1f}pts"
            strengths.append("high success rate")
        elif rate >= 80:
            reason = f"Good {rate:.0f}% success ({done}/{tried}) → {points:.1f}pts"
        else:
            reason = f"Low {rate:.0f}% success ({done}/{tried}) → {points:.1f}pts"
            concerns.append("low success rate")
    factors.append(FactorScore(ScoreFactor.SUCCESS_RATE, points, reason))

    # 2. Speed
    w = config.weight(ScoreFactor.SPEED)
    avg = stats.avg_completion_minutes
    bench = config.speed_benchmarks
    if avg is None:
        points = w * NEW_AGENT_SPEED_SHARE
        reason = f"No speed data yet (default {NEW_AGENT_SPEED_SHARE:.0%}) → {points:.1f}pts"
    elif avg <= bench.excellent:
        points = w * 1.0
        reason = f"Lightning fast avg {avg:.1f}min (≤{bench.excellent:g}min) → {points:.1f}pts"
        strengths.append("very fast")
    elif avg <= bench.good:
        points = w * 0.8
        reason = f"Good speed avg {avg:.1f}min (≤{bench.good:g}min) → {points:.1f}pts"
        strengths.append("good speed")
    elif avg <= bench.acceptable:
        points = w * 0.5
        reason = f"Average speed {avg:.1f}min (≤{bench.acceptable:g}min) → {points:.1f}pts"
    else:
        points = w * 0.2
        reason = f"Slow avg {avg:.1f}min (>{bench.acceptable:g}min) → {points:.1f}pts"
        concerns.append("slow completion")
    factors.append(FactorScore(ScoreFactor.SPEED, points, reason))

    # 3. Current load
    w = config.weight(ScoreFactor.CURRENT_LOAD)
    active = stats.active_workload
    capacity = config.max_active_workload if agent.max_active_workload is None else agent.max_active_workload
    ratio = active / capacity if capacity else 1.0
    if active == 0:
        points = w * 1.0
        reason = f"Free, no active payouts → {points:.1f}pts"
        strengths.append("no active load")
    elif ratio <= 0.3:
        points = w * 0.8
        reason = f"Light load {active}/{capacity} active → {points:.1f}pts"
        strengths.append("light load")
    elif ratio <= 0.6:
        points = w * 0.5
        reason = f"Moderate load {active}/{capacity} active → {points:.1f}pts"
    elif ratio < 1.0:
        points = w * 0.2
        reason = f"Heavy load {active}/{capacity} active → {points:.1f}pts"
        concerns.append("overloaded")
    else:
        points = 0.0
        reason = f"FULL {active}/{capacity}, at max capacity → 0pts"
        concerns.append("overloaded")
    factors.append(FactorScore(ScoreFactor.CURRENT_LOAD, points, reason))

    # 4. Cancel rate
    w = config.weight(ScoreFactor.CANCEL_RATE)
    cancel_rate = stats.total_cancelled / tried * 100 if tried else 0.0
    today_cancels = stats.today_cancelled
    if today_cancels >= config.cancel_threshold:
        points = 0.0
        reason = f"Too many cancels today ({today_cancels}), blocked → 0pts"
        concerns.append("frequent cancels")
    elif cancel_rate <= 2:
        points = w * 1.0
        reason = f"Excellent, only {cancel_rate:.0f}% cancel rate → {points:.1f}pts"
    elif cancel_rate <= 10:
        points = w * 0.7
        reason = f"Acceptable {cancel_rate:.0f}% cancel rate → {points:.1f}pts"
    elif cancel_rate <= 25:
        points = w * 0.3
        reason = f"High {cancel_rate:.0f}% cancel rate, risky → {points:.1f}pts"
        concerns.append("frequent cancels")
    else:
        points = 0.0
        reason = f"Very high {cancel_rate:.0f}% cancel rate, unreliable → 0pts"
        concerns.append("frequent cancels")
    factors.append(FactorScore(ScoreFactor.CANCEL_RATE, points, reason))

    # 5. Cooldown
    w = config.weight(ScoreFactor.COOLDOWN)
    idle = stats.minutes_idle(context.now)
    cooldown = config.cooldown_minutes
    if idle is None or idle >= cooldown * 2:
        points = w * 1.0
        rested = "never assigned" if idle is None else f"idle {idle:.0f}min"
        reason = f"Well rested, {rested} → {points:.1f}pts"
    elif idle >= cooldown:
        points = w * 0.7
        reason = f"Cooldown passed, idle {idle:.0f}min → {points:.1f}pts"
    else:
        points = w * (idle / cooldown)
        reason = f"Still cooling down, only {idle:.1f}min idle → {points:.1f}pts"
    factors.append(FactorScore(ScoreFactor.COOLDOWN, points, reason))

    # 6. Amount tier match
    w = config.weight(ScoreFactor.AMOUNT_MATCH)
    requested = get_amount_tier(amount, config)
    best = stats.best_amount_tier
    if requested == best:
        points = w * 1.0
        reason = f"Perfect tier match, agent excels at {requested.value} amounts → {points:.1f}pts"
        strengths.append("amount tier match")
    else:
        points = w * 0.4
        reason = f"Tier mismatch, agent best at {best.value}, this is {requested.value} → {points:.1f}pts"
    factors.append(FactorScore(ScoreFactor.AMOUNT_MATCH, points, reason))

    # 7. Online status
    w = config.weight(ScoreFactor.ONLINE_STATUS)
    inactive = agent.minutes_inactive(context.now)
    if inactive is not None and agent.is_online and inactive < 5:
        points = w * 1.0
        reason = f"Online now, active {inactive:.0f}min ago → {points:.1f}pts"
        strengths.append("online")
    elif inactive is not None and inactive < 15:
        points = w * 0.7
        reason = f"Recently active, {inactive:.0f}min ago → {points:.1f}pts"
    elif inactive is not None and inactive < 60:
        points = w * 0.3
        reason = f"Idle, last seen {inactive:.0f}min ago → {points:.1f}pts"
    else:
        points = 0.0
        seen = "unknown" if inactive is None else f"{int(inactive // 60)}h ago"
        reason = f"Offline, last seen {seen} → 0pts"
        concerns.append("offline")
    factors.append(FactorScore(ScoreFactor.ONLINE_STATUS, points, reason))

    # 8. Priority
    w = config.weight(ScoreFactor.PRIORITY)
    points = w * PRIORITY_MULTIPLIER[agent.priority]
    factors.append(
        FactorScore(ScoreFactor.PRIORITY, points, f"Priority: {agent.priority.value} → {points:.1f}pts")
    )

    # Penalties
    penalty = 0.0
    notes: list[str] = []
    if stats.today_count >= config.max_daily_count:
        penalty -= 50
        notes.append(f"Hit daily limit ({stats.today_count}/{config.max_daily_count})")
    elif stats.today_count > config.max_daily_count * 0.9:
        penalty -= 20
        notes.append(f"Near daily limit ({stats.today_count}/{config.max_daily_count})")
    if today_cancels >= 3:
        penalty -= 15
        notes.append(f"{today_cancels} cancels today")

    if notes:
        reason = f"Penalties: {', '.join(notes)} → {penalty:.0f}pts"
    else:
        reason = "No penalties → 0pts"
    factors.append(FactorScore(ScoreFactor.PENALTIES, penalty, reason))

    return finalize(agent, factors, strengths, concerns, config, rng)
