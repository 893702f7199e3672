"""Run one selection against the configured database.

Usage:
    python -m payroute.tools.run_selection --kind payin --amount 2500
    python -m payroute.tools.run_selection --kind payout --amount 12000 --subject M-17
    python -m payroute.tools.run_selection --kind payin --amount 900 --seed 42 --db-log
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys

from payroute.adapters.logging_sink.logging_sink import LoggingSelectionSink
from payroute.adapters.persistence.database import async_session_factory, engine
from payroute.adapters.persistence.repositories import (
    SqlAgentRepository,
    SqlEndpointRepository,
    SqlEngineConfigSource,
    SqlSelectionLogSink,
)
from payroute.application.use_cases.select_candidate import (
    SelectAgentUseCase,
    SelectEndpointUseCase,
)
from payroute.config import settings
from payroute.domain.entities.selection import SelectionResult

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def run(
    kind: str,
    amount: float,
    subject_id: str | None,
    request_id: str | None,
    seed: int | None,
    db_log: bool,
) -> SelectionResult:
    rng = random.Random(seed)
    try:
        async with async_session_factory() as session:
            sink = SqlSelectionLogSink(session) if db_log else LoggingSelectionSink()
            config_source = SqlEngineConfigSource(session)
            common = dict(rng=rng, log_top_n=settings.selection_log_top_n)

            if kind == "payin":
                use_case = SelectEndpointUseCase(
                    SqlEndpointRepository(session), config_source, sink, **common
                )
                result = await use_case.select_endpoint(amount, subject_id, request_id)
            else:
                use_case = SelectAgentUseCase(
                    SqlAgentRepository(session), config_source, sink, **common
                )
                result = await use_case.select_agent(amount, subject_id, request_id)

            await session.commit()
            return result
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Select a payin endpoint or payout agent")
    parser.add_argument(
        "--kind", choices=("payin", "payout"), required=True,
        help="payin selects a collection endpoint, payout a settlement agent",
    )
    parser.add_argument("--amount", type=float, required=True, help="Request amount")
    parser.add_argument("--subject", type=str, default=None, help="Merchant / subject id")
    parser.add_argument("--request", type=str, default=None, help="Request id for the log")
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the random source (reproducible draws)",
    )
    parser.add_argument(
        "--db-log", action="store_true",
        help="Write the selection log to the database instead of the application log",
    )
    args = parser.parse_args()

    result = asyncio.run(
        run(args.kind, args.amount, args.subject, args.request, args.seed, args.db_log)
    )
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str))
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
