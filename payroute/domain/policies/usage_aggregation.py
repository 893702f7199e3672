"""UsageAggregationPolicy — rebuild UsageStats from assignment records."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from payroute.domain.entities.assignment_record import AssignmentRecord
from payroute.domain.entities.usage_stats import UsageStats
from payroute.domain.value_objects.enums import AssignmentStatus

RECENT_FAILURE_WINDOW = timedelta(hours=1)


def start_of_day(now: datetime) -> datetime:
    """Local calendar-day boundary for ``now``."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def aggregate_usage(records: Iterable[AssignmentRecord], now: datetime) -> UsageStats:
    """Pure function: fold a candidate's assignment records into UsageStats.

    - active workload: records still ASSIGNED
    - today's completed: completion (or assignment) time on or after midnight
    - today's cancelled: cancellation time on or after midnight
    - today's count: today's completed + today's cancelled + active
    - avg completion: mean of completed_at - assigned_at, in minutes
    - recent failures: failures within the last hour
    """
    today = start_of_day(now)
    stats = UsageStats()
    latency_total = 0.0
    latency_count = 0

    for r in records:
        if r.assigned_at is not None and (
            stats.last_assigned_at is None or r.assigned_at > stats.last_assigned_at
        ):
            stats.last_assigned_at = r.assigned_at

        if r.status == AssignmentStatus.ASSIGNED:
            stats.active_workload += 1

        elif r.status == AssignmentStatus.COMPLETED:
            stats.total_completed += 1
            if r.assigned_at is not None and r.completed_at is not None:
                latency_total += (r.completed_at - r.assigned_at).total_seconds() / 60
                latency_count += 1
            if r.completed_at is not None and (
                stats.last_success_at is None or r.completed_at > stats.last_success_at
            ):
                stats.last_success_at = r.completed_at
            settled_at = r.completed_at or r.assigned_at
            if settled_at is not None and settled_at >= today:
                stats.today_completed += 1
                stats.today_volume += r.amount

        elif r.status == AssignmentStatus.CANCELLED:
            stats.total_cancelled += 1
            if r.cancelled_at is not None and r.cancelled_at >= today:
                stats.today_cancelled += 1

        elif r.status == AssignmentStatus.FAILED:
            stats.total_failed += 1
            if r.failed_at is not None and now - r.failed_at <= RECENT_FAILURE_WINDOW:
                stats.recent_failures += 1

    stats.today_count = stats.today_completed + stats.today_cancelled + stats.active_workload
    if latency_count:
        stats.avg_completion_minutes = latency_total / latency_count
    return stats
