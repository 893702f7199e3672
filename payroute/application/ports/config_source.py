"""Port interface for stored engine tuning overrides."""

from abc import ABC, abstractmethod
from typing import Any

from payroute.domain.value_objects.enums import CandidateKind


class EngineConfigSource(ABC):
    @abstractmethod
    async def load_overrides(self, kind: CandidateKind) -> dict[str, Any] | None:
        """Return the partial override document for ``kind``, or None if unset."""
        ...
