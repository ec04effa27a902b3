import json
from contextlib import contextmanager

import pytest

from chthon.core.config import settings
from chthon.core.tiers import (
    ProviderNotAllowedError,
    TierLimits,
    get_tier_limits,
    get_tier_registry,
    provider_vendor,
    reset_tier_registry,
    select_provider,
)
from chthon.models.enums import UserTier


@contextmanager
def _temp_tiers(value: str):
    previous = settings.TIERS
    settings.TIERS = value
    reset_tier_registry()
    try:
        yield
    finally:
        settings.TIERS = previous
        reset_tier_registry()


def _limits(**overrides) -> TierLimits:
    data = {
        'max_tokens': 1000,
        'can_select_provider': True,
        'can_upload_images': True,
        'available_providers': ['openai/gpt-4o-mini', 'google/gemini-1.5-flash'],
    }
    data.update(overrides)
    return TierLimits(**data)


def test_default_tiers():
    registered = get_tier_limits(UserTier.REGISTERED)
    premium = get_tier_limits('premium')
    assert registered.max_tokens == 1000
    assert premium.max_tokens == 1500
    assert 'xai/grok-2-latest' in premium.available_providers
    assert 'xai/grok-2-latest' not in registered.available_providers


def test_limits_are_copies():
    limits = get_tier_limits(UserTier.REGISTERED)
    limits.available_providers.append('other/model')
    assert 'other/model' not in get_tier_limits(UserTier.REGISTERED).available_providers


def test_custom_tier_config_overrides_defaults():
    limits = get_tier_limits(UserTier.CUSTOM, {'max_tokens': 4000, 'available_providers': ['xai/grok-2-latest']})
    assert limits.max_tokens == 4000
    assert limits.available_providers == ['xai/grok-2-latest']
    assert limits.can_upload_images is True


def test_custom_config_ignored_for_other_tiers():
    limits = get_tier_limits(UserTier.REGISTERED, {'max_tokens': 9999})
    assert limits.max_tokens == 1000


def test_invalid_custom_config_falls_back_to_defaults():
    limits = get_tier_limits(UserTier.CUSTOM, {'max_tokens': -5})
    assert limits == get_tier_registry().limits_for(UserTier.CUSTOM)


def test_select_provider():
    limits = _limits()
    assert select_provider(limits, None) == 'openai/gpt-4o-mini'
    assert select_provider(limits, 'google/gemini-1.5-flash') == 'google/gemini-1.5-flash'
    with pytest.raises(ProviderNotAllowedError):
        select_provider(limits, 'xai/grok-2-latest')


def test_select_provider_ignores_request_when_selection_disabled():
    limits = _limits(can_select_provider=False)
    assert select_provider(limits, 'xai/grok-2-latest') == 'openai/gpt-4o-mini'


def test_provider_vendor():
    assert provider_vendor('openai/gpt-4o-mini') == 'openai'
    assert provider_vendor('local') == 'local'


def test_registry_rejects_missing_tier():
    payload = json.dumps({'registered': _limits().model_dump()})
    with _temp_tiers(payload):
        with pytest.raises(RuntimeError, match='missing tier'):
            get_tier_registry()


def test_registry_rejects_duplicate_providers():
    tiers = {
        tier.value: _limits(available_providers=['openai/gpt-4o-mini', 'openai/gpt-4o-mini']).model_dump()
        for tier in UserTier
    }
    with _temp_tiers(json.dumps(tiers)):
        with pytest.raises(RuntimeError, match='duplicate providers'):
            get_tier_registry()


def test_registry_rejects_invalid_json():
    with _temp_tiers('{not json'):
        with pytest.raises(RuntimeError, match='valid JSON'):
            get_tier_registry()


def test_registry_as_dict_lists_every_tier():
    assert set(get_tier_registry().as_dict()) == {tier.value for tier in UserTier}
