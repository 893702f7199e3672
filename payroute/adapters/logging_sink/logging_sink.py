"""Selection log sink that writes each entry as one JSON log line."""

from __future__ import annotations

import json
import logging

from payroute.application.ports.selection_log_sink import SelectionLogSink
from payroute.domain.entities.selection_log import SelectionLogEntry

logger = logging.getLogger(__name__)


class LoggingSelectionSink(SelectionLogSink):
    """Used whenever no database sink is wired."""

    def __init__(self, level: int = logging.INFO, log: logging.Logger | None = None):
        self._level = level
        self._log = log or logger

    async def record(self, entry: SelectionLogEntry) -> None:
        payload = json.dumps(entry.to_dict(), default=str, ensure_ascii=False)
        self._log.log(self._level, "selection %s", payload)
