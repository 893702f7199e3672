"""BankHealth entity — operational status of a bank behind collection endpoints."""

from dataclasses import dataclass, field
from datetime import datetime

from payroute.domain.value_objects.enums import BankStatus
from payroute.domain.value_objects.maintenance_window import MaintenanceWindow


@dataclass
class BankHealth:
    bank: str
    status: BankStatus = BankStatus.HEALTHY
    maintenance_windows: list[MaintenanceWindow] = field(default_factory=list)

    def in_maintenance(self, moment: datetime) -> bool:
        return any(w.covers(moment) for w in self.maintenance_windows)
