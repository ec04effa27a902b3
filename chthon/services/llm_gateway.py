from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from chthon.core.config import settings
from chthon.core.tiers import provider_vendor


class LLMGatewayError(RuntimeError):
    pass


@dataclass
class CompletionResult:
    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0
    finish_reason: Optional[str] = None
    provider_details: dict[str, dict[str, Any]] = field(default_factory=dict)


def _extra(obj: Any) -> dict[str, Any]:
    return getattr(obj, 'model_extra', None) or {}


def _to_result(provider: str, response: Any) -> CompletionResult:
    if not response.choices:
        raise LLMGatewayError('Gateway returned no choices')
    choice = response.choices[0]
    usage = response.usage
    prompt_tokens = usage.prompt_tokens if usage else 0
    completion_tokens = usage.completion_tokens if usage else 0
    total_tokens = usage.total_tokens if usage else prompt_tokens + completion_tokens
    cost = float(_extra(response).get('cost') or _extra(usage).get('cost') or 0.0)
    details = {
        'cost': cost,
        'tokens': total_tokens,
        'model': response.model or provider,
        'prompt_tokens': prompt_tokens,
        'completion_tokens': completion_tokens,
        'total_tokens': total_tokens,
        'id': response.id,
        'created': response.created,
        'system_fingerprint': getattr(response, 'system_fingerprint', None),
        'finish_reason': choice.finish_reason,
    }
    return CompletionResult(
        content=choice.message.content or '',
        model=response.model or provider,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
        cost=cost,
        finish_reason=choice.finish_reason,
        provider_details={provider_vendor(provider): details},
    )


class LLMGateway:
    """Chat completions through a unified, OpenAI-compatible AI gateway.

    The provider string (``openai/gpt-4o-mini``) is passed through as the
    model name and the gateway routes it to the upstream vendor.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._base_url = base_url or settings.GATEWAY_BASE_URL
        self._api_key = api_key if api_key is not None else settings.GATEWAY_API_KEY
        self._timeout = timeout or settings.GATEWAY_TIMEOUT_SECONDS

    def _build_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise LLMGatewayError("GATEWAY_API_KEY is missing in environment or .env")
        return AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, timeout=self._timeout)

    async def complete(
        self,
        *,
        provider: str,
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        logger.debug(
            'llm_gateway.request',
            provider=provider,
            messages=len(messages),
            max_tokens=max_tokens,
        )
        client = self._build_client()
        try:
            response = await client.chat.completions.create(
                model=provider,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as exc:
            raise LLMGatewayError(str(exc)) from exc
        finally:
            await client.close()
        return _to_result(provider, response)


async def complete_chat(
    *,
    provider: str,
    messages: list[dict[str, Any]],
    max_tokens: int,
    temperature: float,
) -> CompletionResult:
    gateway = LLMGateway()
    return await gateway.complete(
        provider=provider,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )
