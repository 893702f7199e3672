"""EngineConfig — immutable tuning values for one selection run.

Rule: no selection logic here, just parameters and their sanity checks.
Overrides from storage are merged onto these defaults by the config resolver.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields

from payroute.domain.value_objects.enums import AmountTier, CandidateKind, ScoreFactor


@dataclass(frozen=True)
class TierRange:
    minimum: float
    maximum: float


@dataclass(frozen=True)
class SpeedBenchmarks:
    """Average completion time thresholds, in minutes."""

    excellent: float = 5
    good: float = 15
    acceptable: float = 30


PAYIN_WEIGHTS: dict[ScoreFactor, float] = {
    ScoreFactor.SUCCESS_RATE: 25,
    ScoreFactor.DAILY_LIMIT_HEADROOM: 20,
    ScoreFactor.COOLDOWN: 15,
    ScoreFactor.AMOUNT_MATCH: 15,
    ScoreFactor.OWNER_BALANCE: 10,
    ScoreFactor.BANK_HEALTH: 5,
    ScoreFactor.TIME_WINDOW: 5,
}

PAYOUT_WEIGHTS: dict[ScoreFactor, float] = {
    ScoreFactor.SUCCESS_RATE: 25,
    ScoreFactor.SPEED: 20,
    ScoreFactor.CURRENT_LOAD: 15,
    ScoreFactor.CANCEL_RATE: 15,
    ScoreFactor.COOLDOWN: 10,
    ScoreFactor.AMOUNT_MATCH: 5,
    ScoreFactor.ONLINE_STATUS: 5,
    ScoreFactor.PRIORITY: 5,
}


@dataclass(frozen=True)
class EngineConfig:
    kind: CandidateKind

    # --- Selection ---
    # Candidates scoring below this never enter the weighted draw.
    min_score_threshold: float = 30
    # Top N of the ranked list that compete in the draw.
    max_candidates: int = 5
    # weight = score ** exponent; 1 is linear, >1 favours the top scorer.
    score_exponent: float = 2.0
    max_fallback_attempts: int = 3

    # --- Operational limits ---
    # Minimum gap between assignments to the same candidate.
    cooldown_minutes: float = 2
    max_active_workload: int = 10
    max_daily_count: int = 50
    cancel_threshold: int = 3

    # Used when a collection endpoint does not carry its own limits.
    default_min_amount: float = 500
    default_max_amount: float = 50_000
    default_daily_volume_limit: float = 100_000

    amount_tiers: dict[AmountTier, TierRange] = field(
        default_factory=lambda: {
            AmountTier.LOW: TierRange(500, 2_000),
            AmountTier.MEDIUM: TierRange(2_001, 10_000),
            AmountTier.HIGH: TierRange(10_001, 50_000),
        }
    )
    speed_benchmarks: SpeedBenchmarks = field(default_factory=SpeedBenchmarks)
    weights: dict[ScoreFactor, float] = field(default_factory=lambda: dict(PAYIN_WEIGHTS))

    # --- Feature flags ---
    enable_randomness: bool = True
    enable_fallback: bool = True
    enable_logging: bool = True

    # Random boost spans ±(factor / 2) of the pre-boost score.
    randomness_factor: float = 0.1

    @property
    def attempt_budget(self) -> int:
        return self.max_fallback_attempts if self.enable_fallback else 1

    def weight(self, factor: ScoreFactor) -> float:
        return self.weights.get(factor, 0.0)

    def validate(self) -> None:
        """Basic sanity checks."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
                raise ValueError(f"{f.name} must be >= 0")

        if self.max_candidates < 1:
            raise ValueError("max_candidates must be >= 1")
        if self.score_exponent <= 0:
            raise ValueError("score_exponent must be > 0")
        if self.max_fallback_attempts < 1:
            raise ValueError("max_fallback_attempts must be >= 1")
        if self.randomness_factor > 1:
            raise ValueError("randomness_factor must be <= 1")
        if self.default_min_amount > self.default_max_amount:
            raise ValueError("default_min_amount must not exceed default_max_amount")

        if any(w < 0 for w in self.weights.values()):
            raise ValueError("weights must be >= 0")

        missing = set(AmountTier) - set(self.amount_tiers)
        if missing:
            raise ValueError(f"amount_tiers missing: {sorted(t.value for t in missing)}")
        low = self.amount_tiers[AmountTier.LOW].maximum
        medium = self.amount_tiers[AmountTier.MEDIUM].maximum
        high = self.amount_tiers[AmountTier.HIGH].maximum
        if not low <= medium <= high:
            raise ValueError("amount tier maximums must be ascending (low <= medium <= high)")

        bench = self.speed_benchmarks
        if not 0 <= bench.excellent <= bench.good <= bench.acceptable:
            raise ValueError("speed benchmarks must be ascending (excellent <= good <= acceptable)")

    def snapshot(self) -> dict:
        """JSON-friendly copy of every field, for the selection log."""
        data = asdict(self)
        data["kind"] = self.kind.value
        data["amount_tiers"] = {
            tier.value: asdict(rng) for tier, rng in self.amount_tiers.items()
        }
        data["weights"] = {factor.value: w for factor, w in self.weights.items()}
        return data


def default_payin_config() -> EngineConfig:
    """Defaults for routing deposits to collection endpoints."""
    c = EngineConfig(kind=CandidateKind.COLLECTION_ENDPOINT)
    c.validate()
    return c


def default_payout_config() -> EngineConfig:
    """Defaults for routing settlements to agents."""
    c = EngineConfig(
        kind=CandidateKind.SETTLEMENT_AGENT,
        min_score_threshold=20,
        cooldown_minutes=1,
        max_active_workload=10,
        max_daily_count=100,
        cancel_threshold=5,
        default_min_amount=100,
        default_max_amount=100_000,
        amount_tiers={
            AmountTier.LOW: TierRange(100, 5_000),
            AmountTier.MEDIUM: TierRange(5_001, 25_000),
            AmountTier.HIGH: TierRange(25_001, 100_000),
        },
        weights=dict(PAYOUT_WEIGHTS),
    )
    c.validate()
    return c


def default_config_for(kind: CandidateKind) -> EngineConfig:
    if kind == CandidateKind.COLLECTION_ENDPOINT:
        return default_payin_config()
    return default_payout_config()
