"""Rough token accounting used to keep prompts inside a context budget.

The estimate is the usual ~4 characters per token approximation; it does not
depend on the upstream tokenizer.
"""
from __future__ import annotations

import math
from typing import Mapping, Sequence, TypeVar

from chthon.models.enums import ChatRole

ROLE_OVERHEAD_TOKENS = 3
CONVERSATION_OVERHEAD_TOKENS = 10
DEFAULT_MAX_TOKENS = 4000

MessageT = TypeVar('MessageT', bound=Mapping[str, str])


def estimate_token_count(text: str) -> int:
    return math.ceil(len(text) / 4)


def estimate_conversation_tokens(messages: Sequence[Mapping[str, str]]) -> int:
    total = CONVERSATION_OVERHEAD_TOKENS
    for message in messages:
        total += ROLE_OVERHEAD_TOKENS + estimate_token_count(message['content'])
    return total


def _is_system(message: Mapping[str, str]) -> bool:
    return message['role'] == ChatRole.SYSTEM.value


def truncate_conversation(
    messages: Sequence[MessageT],
    max_tokens: int = DEFAULT_MAX_TOKENS,
    preserve_system_messages: bool = True,
) -> list[MessageT]:
    """Drop old messages until the conversation fits ``max_tokens``.

    System messages are pinned (and moved to the front) when
    ``preserve_system_messages`` is set. The opening message is kept as
    context for as long as possible, then dropped; the latest message is
    never dropped, so the result only exceeds the budget when the pinned
    messages plus the latest one already do.
    """
    if estimate_conversation_tokens(messages) <= max_tokens:
        return list(messages)

    if preserve_system_messages:
        pinned = [message for message in messages if _is_system(message)]
        rest = [message for message in messages if not _is_system(message)]
    else:
        pinned = []
        rest = list(messages)

    def over_budget() -> bool:
        return estimate_conversation_tokens(pinned + rest) > max_tokens

    while over_budget() and len(rest) > 2:
        del rest[1]
    while over_budget() and len(rest) > 1:
        del rest[0]

    return pinned + rest
