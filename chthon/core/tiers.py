from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chthon.core.config import settings
from chthon.models.enums import UserTier


class ProviderNotAllowedError(ValueError):
    pass


class TierLimits(BaseModel):
    model_config = ConfigDict(extra='forbid')

    max_tokens: int = Field(..., gt=0)
    can_select_provider: bool = True
    can_upload_images: bool = True
    available_providers: list[str] = Field(..., min_length=1)


class TierRegistry:
    def __init__(self, tiers: dict[str, TierLimits]) -> None:
        missing = [tier.value for tier in UserTier if tier.value not in tiers]
        if missing:
            raise RuntimeError(f"TIERS is missing tier(s): {', '.join(missing)}")
        unknown = sorted(set(tiers) - {tier.value for tier in UserTier})
        if unknown:
            raise RuntimeError(f"TIERS contains unknown tier(s): {', '.join(unknown)}")
        for name, limits in tiers.items():
            cleaned = [provider.strip() for provider in limits.available_providers]
            if any(not provider for provider in cleaned):
                raise RuntimeError(f"TIERS[{name}] contains an empty provider value")
            if len(set(cleaned)) != len(cleaned):
                raise RuntimeError(f"TIERS[{name}] contains duplicate providers")
        self._tiers = tiers

    def limits_for(self, tier: UserTier | str) -> TierLimits:
        key = tier.value if isinstance(tier, UserTier) else tier
        limits = self._tiers.get(key)
        if limits is None:
            raise RuntimeError(f"Unknown tier: {key}")
        return limits.model_copy(deep=True)

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return {name: limits.model_dump() for name, limits in self._tiers.items()}


def _parse_tiers(raw: str) -> dict[str, TierLimits]:
    if not raw or not raw.strip():
        raise RuntimeError("TIERS is missing in environment or .env")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:  # pragma: no cover - guardrail
        raise RuntimeError("TIERS must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise RuntimeError("TIERS must be a JSON object")
    try:
        return {name: TierLimits.model_validate(item) for name, item in payload.items()}
    except ValidationError as exc:
        raise RuntimeError(f"TIERS validation error: {exc}") from exc


@lru_cache
def get_tier_registry() -> TierRegistry:
    return TierRegistry(_parse_tiers(settings.TIERS))


def reset_tier_registry() -> None:
    get_tier_registry.cache_clear()


def get_tier_limits(tier: UserTier | str, tier_config: Optional[dict[str, Any]] = None) -> TierLimits:
    """Return the limits for ``tier``.

    A ``custom`` tier with a stored configuration uses that configuration in
    place of the defaults; an invalid stored configuration falls back to the
    defaults and is logged.
    """
    registry = get_tier_registry()
    key = tier.value if isinstance(tier, UserTier) else tier
    if key == UserTier.CUSTOM.value and tier_config:
        defaults = registry.limits_for(UserTier.CUSTOM).model_dump()
        try:
            return TierLimits.model_validate({**defaults, **tier_config})
        except ValidationError as exc:
            logger.warning('tiers.custom_config_invalid', error=str(exc))
    return registry.limits_for(key)


def select_provider(limits: TierLimits, requested: Optional[str]) -> str:
    default = limits.available_providers[0]
    if not requested or not limits.can_select_provider:
        return default
    if requested in limits.available_providers:
        return requested
    raise ProviderNotAllowedError(f"Provider not available for tier: {requested}")


def provider_vendor(provider: str) -> str:
    """``openai/gpt-4o-mini`` -> ``openai``."""
    return provider.split('/', 1)[0]
