"""Port interface for the per-decision explanation trail."""

from abc import ABC, abstractmethod

from payroute.domain.entities.selection_log import SelectionLogEntry


class SelectionLogSink(ABC):
    @abstractmethod
    async def record(self, entry: SelectionLogEntry) -> None:
        ...
