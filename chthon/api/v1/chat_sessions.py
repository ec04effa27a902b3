from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from chthon.core.tiers import TierLimits
from chthon.db.session import get_session
from chthon.models.chat_message import ChatMessage
from chthon.models.chat_session import ChatSession
from chthon.models.user import User
from chthon.schemas.chat import (
    ChatMessageCreate,
    ChatMessageOut,
    ChatSessionCreate,
    ChatSessionDetailOut,
    ChatSessionOut,
    ChatSessionUpdate,
)
from chthon.services.auth_service import get_current_user
from chthon.services.user_service import user_limits
from chthon.services.chat_service import (
    add_message,
    create_session,
    delete_session,
    get_user_session,
    list_messages,
    list_sessions,
    rename_session,
)

router = APIRouter(prefix='/chat-sessions', tags=['chat-sessions'])


def ensure_session(session: Session, session_id: str, user: User) -> ChatSession:
    record = get_user_session(session, session_id, user.id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Chat session not found')
    return record


def check_image_permission(limits: TierLimits, image_url: Optional[str]) -> None:
    if image_url and not limits.can_upload_images:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Image uploads not allowed for tier')


def to_session_out(record: ChatSession) -> ChatSessionOut:
    return ChatSessionOut(
        id=record.id,
        name=record.name,
        last_updated=record.last_updated,
        created_at=record.created_at,
    )


def to_message_out(record: ChatMessage) -> ChatMessageOut:
    return ChatMessageOut(
        id=record.id,
        session_id=record.session_id,
        role=record.role,
        content=record.content,
        image_url=record.image_url,
        created_at=record.created_at,
    )


@router.get('', response_model=list[ChatSessionOut])
def list_chat_sessions(
    limit: int = 50,
    offset: int = 0,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[ChatSessionOut]:
    return [to_session_out(record) for record in list_sessions(session, user.id, limit=limit, offset=offset)]


@router.post('', response_model=ChatSessionOut, status_code=status.HTTP_201_CREATED)
def create_chat_session(
    payload: ChatSessionCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ChatSessionOut:
    record = create_session(session, user.id, payload.name)
    return to_session_out(record)


@router.get('/{session_id}', response_model=ChatSessionDetailOut)
def get_chat_session(
    session_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ChatSessionDetailOut:
    record = ensure_session(session, session_id, user)
    messages = list_messages(session, record.id)
    return ChatSessionDetailOut(
        **to_session_out(record).model_dump(),
        messages=[to_message_out(message) for message in messages],
    )


@router.put('/{session_id}', response_model=ChatSessionOut)
def rename_chat_session(
    session_id: str,
    payload: ChatSessionUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ChatSessionOut:
    record = ensure_session(session, session_id, user)
    record = rename_session(session, record, payload.name)
    return to_session_out(record)


@router.delete('/{session_id}')
def delete_chat_session(
    session_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    record = ensure_session(session, session_id, user)
    delete_session(session, record)
    return {'success': True}


@router.get('/{session_id}/messages', response_model=list[ChatMessageOut])
def list_chat_messages(
    session_id: str,
    limit: int = 200,
    offset: int = 0,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[ChatMessageOut]:
    ensure_session(session, session_id, user)
    messages = list_messages(session, session_id, limit=limit, offset=offset)
    return [to_message_out(record) for record in messages]


@router.post('/{session_id}/messages', response_model=ChatMessageOut, status_code=status.HTTP_201_CREATED)
def create_chat_message(
    session_id: str,
    payload: ChatMessageCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ChatMessageOut:
    record = ensure_session(session, session_id, user)
    check_image_permission(user_limits(user), payload.image_url)
    message = add_message(session, record, payload.role, payload.content, payload.image_url)
    return to_message_out(message)
