"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class CandidateKind(str, Enum):
    COLLECTION_ENDPOINT = "payin"
    SETTLEMENT_AGENT = "payout"


class AmountTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AgentPriority(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class BankStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    DOWN = "down"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ScoreFactor(str, Enum):
    SUCCESS_RATE = "success_rate"
    DAILY_LIMIT_HEADROOM = "daily_limit_headroom"
    COOLDOWN = "cooldown"
    AMOUNT_MATCH = "amount_match"
    OWNER_BALANCE = "owner_balance"
    BANK_HEALTH = "bank_health"
    TIME_WINDOW = "time_window"
    SPEED = "speed"
    CURRENT_LOAD = "current_load"
    CANCEL_RATE = "cancel_rate"
    ONLINE_STATUS = "online_status"
    PRIORITY = "priority"
    PENALTIES = "penalties"
    RANDOM_BOOST = "random_boost"


# Factors that adjust a score rather than describe a strength of the candidate
ADJUSTMENT_FACTORS = frozenset({ScoreFactor.PENALTIES, ScoreFactor.RANDOM_BOOST})


class SelectionErrorKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    NO_CANDIDATES = "no_candidates"
    BELOW_THRESHOLD = "below_threshold"
    POOL_EXHAUSTED = "pool_exhausted"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    INTERNAL_ERROR = "internal_error"
