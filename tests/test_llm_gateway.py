from types import SimpleNamespace

import anyio
import pytest

from chthon.services import llm_gateway
from chthon.services.llm_gateway import LLMGateway, LLMGatewayError, _to_result


def _response(content: str = 'hello', cost=None, choices=True):
    message = SimpleNamespace(content=content)
    choice = SimpleNamespace(message=message, finish_reason='stop')
    return SimpleNamespace(
        id='chatcmpl-1',
        created=1700000000,
        model='gpt-4o-mini',
        choices=[choice] if choices else [],
        usage=SimpleNamespace(prompt_tokens=7, completion_tokens=3, total_tokens=10, model_extra=None),
        model_extra={'cost': cost} if cost is not None else None,
    )


class _FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


class _FakeClient:
    def __init__(self, completions):
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def close(self):
        self.closed = True


def _complete(gateway: LLMGateway, provider: str = 'openai/gpt-4o-mini'):
    return anyio.run(
        lambda: gateway.complete(
            provider=provider,
            messages=[{'role': 'user', 'content': 'hi'}],
            max_tokens=100,
            temperature=0.7,
        )
    )


def test_to_result_maps_usage_and_cost():
    result = _to_result('openai/gpt-4o-mini', _response(cost=0.0042))
    assert result.content == 'hello'
    assert result.model == 'gpt-4o-mini'
    assert result.total_tokens == 10
    assert result.prompt_tokens == 7
    assert result.cost == 0.0042
    assert result.finish_reason == 'stop'
    details = result.provider_details['openai']
    assert details['cost'] == 0.0042
    assert details['total_tokens'] == 10
    assert details['id'] == 'chatcmpl-1'


def test_to_result_without_cost():
    assert _to_result('google/gemini-1.5-flash', _response()).cost == 0.0


def test_to_result_rejects_empty_choices():
    with pytest.raises(LLMGatewayError):
        _to_result('openai/gpt-4o-mini', _response(choices=False))


def test_missing_api_key_raises():
    with pytest.raises(LLMGatewayError, match='GATEWAY_API_KEY'):
        _complete(LLMGateway(api_key=''))


def test_complete_passes_provider_as_model(monkeypatch):
    completions = _FakeCompletions(response=_response(content='pong'))
    client = _FakeClient(completions)
    monkeypatch.setattr(LLMGateway, '_build_client', lambda self: client)

    result = _complete(LLMGateway(api_key='key'), provider='xai/grok-2-latest')

    assert result.content == 'pong'
    assert completions.calls[0]['model'] == 'xai/grok-2-latest'
    assert completions.calls[0]['max_tokens'] == 100
    assert client.closed


def test_complete_wraps_client_errors(monkeypatch):
    error = llm_gateway.OpenAIError('rate limited')
    client = _FakeClient(_FakeCompletions(error=error))
    monkeypatch.setattr(LLMGateway, '_build_client', lambda self: client)

    with pytest.raises(LLMGatewayError, match='rate limited'):
        _complete(LLMGateway(api_key='key'))
    assert client.closed
