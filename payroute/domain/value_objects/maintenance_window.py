"""MaintenanceWindow value object — a recurring bank downtime slot."""

from dataclasses import dataclass
from datetime import datetime

DAILY = "daily"


@dataclass(frozen=True)
class MaintenanceWindow:
    day: str  # lowercase weekday name ("monday") or "daily"
    start: str  # "HH:MM"
    end: str  # "HH:MM"

    def covers(self, moment: datetime) -> bool:
        weekday = moment.strftime("%A").lower()
        if self.day.lower() not in (weekday, DAILY):
            return False
        current = moment.strftime("%H:%M")
        return self.start <= current <= self.end
