import json
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session

from chthon.api.v1.chat_sessions import check_image_permission, ensure_session
from chthon.core.config import settings
from chthon.core.tiers import ProviderNotAllowedError, provider_vendor, select_provider
from chthon.db.session import get_session
from chthon.models.enums import ChatRole, RequestType
from chthon.models.user import User
from chthon.schemas.chat import ChatCompletionOut, ChatCompletionRequest
from chthon.services.analytics_service import record_analytics
from chthon.services.auth_service import get_current_user
from chthon.services.chat_service import add_message, list_messages
from chthon.services.llm_gateway import LLMGatewayError, complete_chat
from chthon.services.response_format import clean_response_text
from chthon.services.token_estimation import truncate_conversation
from chthon.services.user_service import user_limits

router = APIRouter(tags=['chat'])


def _role_value(role: Any) -> str:
    return role.value if hasattr(role, 'value') else role


def _with_system_prompt(conversation: list[dict[str, str]]) -> list[dict[str, str]]:
    if not settings.SYSTEM_PROMPT:
        return conversation
    return [{'role': ChatRole.SYSTEM.value, 'content': settings.SYSTEM_PROMPT}, *conversation]


def _attach_image(messages: list[dict[str, Any]], image_url: Optional[str]) -> list[dict[str, Any]]:
    if not image_url:
        return messages
    for index in range(len(messages) - 1, -1, -1):
        if messages[index]['role'] == ChatRole.USER.value:
            text = messages[index]['content']
            messages[index] = {
                'role': ChatRole.USER.value,
                'content': [
                    {'type': 'text', 'text': text},
                    {'type': 'image_url', 'image_url': {'url': image_url}},
                ],
            }
            break
    return messages


@router.post('/chat', response_model=ChatCompletionOut)
async def chat_completion(
    payload: ChatCompletionRequest,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ChatCompletionOut:
    limits = user_limits(user)
    check_image_permission(limits, payload.image_url)
    try:
        provider = select_provider(limits, payload.provider)
    except ProviderNotAllowedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    chat_record = None
    if payload.session_id:
        chat_record = ensure_session(session, payload.session_id, user)
        add_message(session, chat_record, ChatRole.USER, payload.content, payload.image_url)
        conversation = [
            {'role': _role_value(message.role), 'content': message.content}
            for message in list_messages(session, chat_record.id)
        ]
    else:
        conversation = [
            {'role': _role_value(message.role), 'content': message.content}
            for message in payload.messages
        ]
    if not any(message['role'] == ChatRole.USER.value for message in conversation):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='No user message found')
    turns = [message for message in conversation if message['role'] != ChatRole.SYSTEM.value]
    if turns[-1]['role'] != ChatRole.USER.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Last message must be from user')

    prompt = _with_system_prompt(conversation)
    messages = truncate_conversation(
        prompt,
        max_tokens=settings.CONTEXT_TOKEN_BUDGET,
        preserve_system_messages=True,
    )
    messages = _attach_image([dict(message) for message in messages], payload.image_url)
    request_type = RequestType.IMAGE if payload.image_url else RequestType.TEXT
    request_size = len(json.dumps(messages, ensure_ascii=False).encode('utf-8'))
    tier = user.tier.value

    logger.info(
        'chat.completion.start',
        user_id=user.id,
        session_id=payload.session_id,
        provider=provider,
        messages=len(messages),
        dropped=len(prompt) - len(messages),
        tier=tier,
    )
    started = time.perf_counter()
    try:
        result = await complete_chat(
            provider=provider,
            messages=messages,
            max_tokens=limits.max_tokens,
            temperature=settings.TEMPERATURE,
        )
    except LLMGatewayError as exc:
        elapsed = time.perf_counter() - started
        logger.warning('chat.completion.failed', user_id=user.id, provider=provider, error=str(exc))
        record_analytics(
            session,
            user_id=user.id,
            provider=provider_vendor(provider),
            model=provider,
            request_type=request_type,
            success=False,
            processing_time=elapsed,
            user_tier=tier,
            error=str(exc),
            request_size=request_size,
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail='Error from LLM gateway') from exc
    elapsed = time.perf_counter() - started

    content = clean_response_text(result.content)
    record_analytics(
        session,
        user_id=user.id,
        provider=provider_vendor(provider),
        model=provider,
        request_type=request_type,
        success=True,
        processing_time=elapsed,
        user_tier=tier,
        cost=result.cost,
        tokens=result.total_tokens,
        prompt_tokens=result.prompt_tokens,
        completion_tokens=result.completion_tokens,
        provider_details=result.provider_details,
        request_size=request_size,
        response_size=len(content.encode('utf-8')),
    )

    message_id = None
    if chat_record is not None:
        assistant = add_message(session, chat_record, ChatRole.ASSISTANT, content)
        message_id = assistant.id

    logger.info(
        'chat.completion.done',
        user_id=user.id,
        provider=provider,
        tokens=result.total_tokens,
        cost=result.cost,
        elapsed=round(elapsed, 3),
    )
    return ChatCompletionOut(
        content=content,
        provider=provider,
        model=result.model,
        tokens=result.total_tokens,
        session_id=payload.session_id,
        message_id=message_id,
    )
