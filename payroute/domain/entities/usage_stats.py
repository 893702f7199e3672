"""UsageStats entity — per-candidate live counters used by scoring and validation."""

from dataclasses import dataclass
from datetime import datetime

from payroute.domain.value_objects.enums import AmountTier


@dataclass
class UsageStats:
    today_volume: float = 0.0
    today_count: int = 0
    active_workload: int = 0
    today_completed: int = 0
    today_cancelled: int = 0
    total_completed: int = 0
    total_cancelled: int = 0
    total_failed: int = 0
    recent_failures: int = 0  # failures within the last hour
    avg_completion_minutes: float | None = None
    last_assigned_at: datetime | None = None
    last_success_at: datetime | None = None
    best_amount_tier: AmountTier = AmountTier.MEDIUM

    @property
    def total_attempted(self) -> int:
        return self.total_completed + self.total_cancelled + self.total_failed

    @property
    def success_rate(self) -> float | None:
        """Completed share of attempted assignments, in percent; None without history."""
        if self.total_attempted == 0:
            return None
        return self.total_completed / self.total_attempted * 100

    def minutes_idle(self, now: datetime) -> float | None:
        """Minutes since the last assignment; None if never assigned."""
        if self.last_assigned_at is None:
            return None
        return (now - self.last_assigned_at).total_seconds() / 60

    @classmethod
    def zeroed(cls) -> "UsageStats":
        return cls()
