"""EngineConfig resolver — merge a stored override document onto defaults.

Never raises: every override is validated on its own (declared type via
pydantic, then range), and anything unusable is logged and replaced by the
default. Keys may be snake_case or the camelCase written by older tooling.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from functools import lru_cache
from typing import Any, get_type_hints

from pydantic import TypeAdapter, ValidationError

from payroute.domain.entities.engine_config import EngineConfig, SpeedBenchmarks, TierRange
from payroute.domain.value_objects.enums import AmountTier, ScoreFactor

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Historical key names → current field names
FIELD_ALIASES: dict[str, str] = {
    "max_active_payouts": "max_active_workload",
    "max_daily_payouts": "max_daily_count",
    "max_daily_txns_per_upi": "max_daily_count",
    "failure_threshold": "cancel_threshold",
}

WEIGHT_ALIASES: dict[str, str] = {
    "daily_limit_left": "daily_limit_headroom",
    "amount_tier_match": "amount_match",
    "trader_balance": "owner_balance",
}

TIER_BOUND_ALIASES: dict[str, str] = {"min": "minimum", "max": "maximum"}

# Lower bounds beyond the general "numeric fields are >= 0"
_MIN_BOUNDS: dict[str, float] = {"max_candidates": 1, "max_fallback_attempts": 1}
_EXCLUSIVE_MIN_BOUNDS: dict[str, float] = {"score_exponent": 0}
_MAX_BOUNDS: dict[str, float] = {"randomness_factor": 1}


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _validate_number(name: str, value: Any, tp: Any = float) -> Any | None:
    """Coerce ``value`` to ``tp`` and range-check it; None when unusable."""
    try:
        coerced = _adapter(tp).validate_python(value)
    except ValidationError as e:
        logger.warning("Ignoring override %s=%r: %s", name, value, e.errors()[0]["msg"])
        return None

    if isinstance(coerced, bool) or not isinstance(coerced, (int, float)):
        return coerced
    if coerced < 0:
        logger.warning("Ignoring override %s=%r: must be >= 0", name, value)
        return None
    if name in _MIN_BOUNDS and coerced < _MIN_BOUNDS[name]:
        logger.warning("Ignoring override %s=%r: must be >= %s", name, value, _MIN_BOUNDS[name])
        return None
    if name in _EXCLUSIVE_MIN_BOUNDS and coerced <= _EXCLUSIVE_MIN_BOUNDS[name]:
        logger.warning(
            "Ignoring override %s=%r: must be > %s", name, value, _EXCLUSIVE_MIN_BOUNDS[name]
        )
        return None
    if name in _MAX_BOUNDS and coerced > _MAX_BOUNDS[name]:
        logger.warning("Ignoring override %s=%r: must be <= %s", name, value, _MAX_BOUNDS[name])
        return None
    return coerced


def _merge_weights(defaults: dict[ScoreFactor, float], raw: Any) -> dict[ScoreFactor, float]:
    merged = dict(defaults)
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring weights override: expected a mapping, got %r", raw)
        return merged
    for key, value in raw.items():
        name = _snake(str(key))
        name = WEIGHT_ALIASES.get(name, name)
        try:
            factor = ScoreFactor(name)
        except ValueError:
            logger.warning("Ignoring weight for unknown factor %r", key)
            continue
        weight = _validate_number(f"weights.{name}", value)
        if weight is not None:
            merged[factor] = weight
    return merged


def _merge_tiers(defaults: dict[AmountTier, TierRange], raw: Any) -> dict[AmountTier, TierRange]:
    merged = dict(defaults)
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring amount_tiers override: expected a mapping, got %r", raw)
        return merged
    for key, bounds in raw.items():
        try:
            tier = AmountTier(str(key).lower())
        except ValueError:
            logger.warning("Ignoring unknown amount tier %r", key)
            continue
        if not isinstance(bounds, Mapping):
            logger.warning("Ignoring amount tier %s: expected a mapping, got %r", tier.value, bounds)
            continue
        current = merged[tier]
        changes: dict[str, float] = {}
        for bound_key, value in bounds.items():
            attr = TIER_BOUND_ALIASES.get(str(bound_key), str(bound_key))
            if attr not in ("minimum", "maximum"):
                logger.warning("Ignoring amount tier %s.%s", tier.value, bound_key)
                continue
            number = _validate_number(f"amount_tiers.{tier.value}.{attr}", value)
            if number is not None:
                changes[attr] = number
        merged[tier] = replace(current, **changes)
    return merged


def _merge_benchmarks(defaults: SpeedBenchmarks, raw: Any) -> SpeedBenchmarks:
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring speed_benchmarks override: expected a mapping, got %r", raw)
        return defaults
    changes: dict[str, float] = {}
    for key, value in raw.items():
        name = _snake(str(key))
        if name not in ("excellent", "good", "acceptable"):
            logger.warning("Ignoring unknown speed benchmark %r", key)
            continue
        number = _validate_number(f"speed_benchmarks.{name}", value)
        if number is not None:
            changes[name] = number
    return replace(defaults, **changes)


def resolve_engine_config(overrides: Any, defaults: EngineConfig) -> EngineConfig:
    """Merge ``overrides`` onto ``defaults`` field by field.

    Args:
        overrides: partial config document (may be None or malformed).
        defaults: the candidate kind's default EngineConfig.

    Returns:
        A validated EngineConfig. If the merged result fails the cross-field
        checks, ``defaults`` is returned unchanged.
    """
    if not overrides:
        return defaults
    if not isinstance(overrides, Mapping):
        logger.warning("Config overrides are not a mapping (%r), using defaults", type(overrides))
        return defaults

    hints = get_type_hints(EngineConfig)
    changes: dict[str, Any] = {}

    for raw_key, value in overrides.items():
        name = _snake(str(raw_key))
        name = FIELD_ALIASES.get(name, name)

        if name == "kind" or name not in hints:
            logger.warning("Ignoring unknown config key %r", raw_key)
            continue

        if name == "weights":
            changes[name] = _merge_weights(changes.get(name, defaults.weights), value)
        elif name == "amount_tiers":
            changes[name] = _merge_tiers(changes.get(name, defaults.amount_tiers), value)
        elif name == "speed_benchmarks":
            changes[name] = _merge_benchmarks(changes.get(name, defaults.speed_benchmarks), value)
        else:
            coerced = _validate_number(name, value, hints[name])
            if coerced is not None:
                changes[name] = coerced

    merged = replace(defaults, **changes)
    try:
        merged.validate()
    except ValueError as e:
        logger.warning("Merged %s config is inconsistent (%s), using defaults", defaults.kind.value, e)
        return defaults

    if changes:
        logger.debug("Config overrides applied: %s", ", ".join(sorted(changes)))
    return merged
