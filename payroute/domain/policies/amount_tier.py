"""AmountTierPolicy — coarse classification of a request amount."""

from payroute.domain.entities.engine_config import EngineConfig
from payroute.domain.value_objects.enums import AmountTier


def get_amount_tier(amount: float, config: EngineConfig) -> AmountTier:
    """Pure function of amount and configured tier maximums.

    Only the upper bounds matter: anything above the medium maximum is HIGH,
    including amounts beyond the high tier's own maximum.
    """
    tiers = config.amount_tiers
    if amount <= tiers[AmountTier.LOW].maximum:
        return AmountTier.LOW
    if amount <= tiers[AmountTier.MEDIUM].maximum:
        return AmountTier.MEDIUM
    return AmountTier.HIGH
