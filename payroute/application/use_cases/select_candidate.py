"""SelectCandidateUseCase — full pipeline: fetch → score → draw → validate → explain."""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Callable

from payroute.application.config_resolver import resolve_engine_config
from payroute.application.ports.candidate_repo import CandidateRepository
from payroute.application.ports.config_source import EngineConfigSource
from payroute.application.ports.selection_log_sink import SelectionLogSink
from payroute.domain.entities.candidate import CollectionEndpoint, SettlementAgent
from payroute.domain.entities.engine_config import EngineConfig, default_config_for
from payroute.domain.entities.selection import ScoredCandidate, ScoringContext, SelectionResult
from payroute.domain.entities.selection_log import SelectionLogEntry
from payroute.domain.policies.amount_tier import get_amount_tier
from payroute.domain.policies.explanation import build_selection_explanation
from payroute.domain.policies.fallback_chain import select_with_fallback
from payroute.domain.policies.rules import PAYIN_RULES, PAYOUT_RULES, SelectionRules
from payroute.domain.policies.scoring import score_all
from payroute.domain.value_objects.enums import SelectionErrorKind

logger = logging.getLogger(__name__)

DEFAULT_LOG_TOP_N = 10


class SelectCandidateUseCase:
    """Orchestrates one selection for a single candidate kind."""

    def __init__(
        self,
        rules: SelectionRules,
        candidate_repo: CandidateRepository,
        config_source: EngineConfigSource,
        log_sink: SelectionLogSink | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
        log_top_n: int = DEFAULT_LOG_TOP_N,
    ):
        self._rules = rules
        self._candidates = candidate_repo
        self._config_source = config_source
        self._log_sink = log_sink
        self._rng = rng or random.Random()
        self._clock = clock
        self._log_top_n = log_top_n

    async def load_config(self) -> EngineConfig:
        """Stored overrides merged onto the kind's defaults; defaults on any failure."""
        defaults = default_config_for(self._rules.kind)
        try:
            overrides = await self._config_source.load_overrides(self._rules.kind)
        except Exception as e:
            logger.warning(
                "Failed to load %s config, using defaults: %s", self._rules.kind.value, e
            )
            return defaults
        return resolve_engine_config(overrides, defaults)

    async def execute(
        self,
        amount: float,
        subject_id: str | None = None,
        request_id: str | None = None,
    ) -> SelectionResult:
        """Select one candidate for ``amount``.

        Pipeline:
        1. Resolve engine config
        2. Fetch eligible candidates
        3. Enrich usage stats, drop candidates that cannot take the amount,
           load the scoring context (defaults when it cannot be loaded)
        4. Score and rank
        5. Weighted draw with real-time validation and fallback
        6. Explain the outcome and record it

        Never raises: unexpected errors come back as an INTERNAL_ERROR result.
        """
        plural = self._rules.plural
        if amount is None or amount <= 0:
            return SelectionResult.failure(
                SelectionErrorKind.INVALID_AMOUNT, f"Invalid amount: {amount!r}"
            )

        try:
            config = await self.load_config()
            now = self._clock()

            # Step 1: candidates
            fetched = await self._candidates.fetch_eligible(amount)
            candidates = [c for c in fetched if c.is_available()]
            if not candidates:
                logger.info("No active %s found", plural)
                return SelectionResult.failure(
                    SelectionErrorKind.NO_CANDIDATES, f"No active {plural} available"
                )
            logger.info(
                "Request %s: %d %s fetched for amount %s",
                request_id, len(candidates), plural, amount,
            )

            # Step 2: stats, amount eligibility, context
            candidates = await self._candidates.enrich(candidates, now)
            candidates = self._rules.eligible(candidates, amount, config, now)
            if not candidates:
                logger.info("Request %s: no %s can take amount %s", request_id, plural, amount)
                return SelectionResult.failure(
                    SelectionErrorKind.NO_CANDIDATES, f"No {plural} can take amount {amount:.0f}"
                )
            context = await self._load_context(candidates, now)

            # Step 3: score
            scored = score_all(candidates, amount, context, config, self._rules.scorer, self._rng)
            logger.info(
                "Request %s: top scores %s",
                request_id,
                ", ".join(f"{s.candidate_id}={s.score}" for s in scored[:5]),
            )

            # Step 4: draw + validate
            result = select_with_fallback(scored, amount, config, self._rules, self._rng, now)

            if result.success:
                result.explanation = build_selection_explanation(
                    result.selected, scored, result.attempts
                )
                logger.info(
                    "Request %s: selected %s (score %d) after %d attempt(s)",
                    request_id, result.selected.candidate_id,
                    result.selected.score, result.total_attempts,
                )
            else:
                logger.info(
                    "Request %s: no %s selected (%s)",
                    request_id, plural, result.error_kind.value,
                )

            if config.enable_logging:
                await self._record(
                    amount, subject_id, request_id, config, candidates, scored, result, now
                )

            return result

        except Exception as e:
            logger.exception("Selection failed for request %s: %s", request_id, e)
            return SelectionResult.failure(SelectionErrorKind.INTERNAL_ERROR, str(e))

    async def _load_context(self, candidates: list, now: datetime) -> ScoringContext:
        try:
            return await self._candidates.fetch_context(candidates, now)
        except Exception as e:
            logger.warning("Failed to load scoring context, using defaults: %s", e)
            return ScoringContext(now=now)

    async def _record(
        self,
        amount: float,
        subject_id: str | None,
        request_id: str | None,
        config: EngineConfig,
        candidates: list,
        scored: list[ScoredCandidate],
        result: SelectionResult,
        now: datetime,
    ) -> None:
        if self._log_sink is None:
            return
        try:
            entry = SelectionLogEntry(
                kind=self._rules.kind,
                request_id=request_id,
                subject_id=subject_id,
                amount=amount,
                amount_tier=get_amount_tier(amount, config),
                candidates_count=len(candidates),
                candidates=scored[: self._log_top_n],
                result=result,
                config=config.snapshot(),
                timestamp=now,
            )
            await self._log_sink.record(entry)
        except Exception as e:
            logger.warning("Failed to record selection log for request %s: %s", request_id, e)


class SelectEndpointUseCase(SelectCandidateUseCase):
    """Picks the collection endpoint that receives an incoming payment."""

    def __init__(
        self,
        candidate_repo: CandidateRepository[CollectionEndpoint],
        config_source: EngineConfigSource,
        log_sink: SelectionLogSink | None = None,
        **kwargs,
    ):
        super().__init__(PAYIN_RULES, candidate_repo, config_source, log_sink, **kwargs)

    async def select_endpoint(
        self,
        amount: float,
        merchant_id: str | None = None,
        request_id: str | None = None,
    ) -> SelectionResult:
        return await self.execute(amount, subject_id=merchant_id, request_id=request_id)


class SelectAgentUseCase(SelectCandidateUseCase):
    """Picks the settlement agent that fulfils an outgoing payment."""

    def __init__(
        self,
        candidate_repo: CandidateRepository[SettlementAgent],
        config_source: EngineConfigSource,
        log_sink: SelectionLogSink | None = None,
        **kwargs,
    ):
        super().__init__(PAYOUT_RULES, candidate_repo, config_source, log_sink, **kwargs)

    async def select_agent(
        self,
        amount: float,
        subject_id: str | None = None,
        request_id: str | None = None,
    ) -> SelectionResult:
        return await self.execute(amount, subject_id=subject_id, request_id=request_id)
