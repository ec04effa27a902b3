from typing import Optional
from datetime import datetime, timezone
from sqlmodel import Session, select
from chthon.models.base import utc_now
from chthon.models.chat_session import ChatSession
from chthon.models.chat_message import ChatMessage
from chthon.models.enums import ChatRole


def default_session_name() -> str:
    return f"Chat {datetime.now(timezone.utc).isoformat()}"


def create_session(session: Session, user_id: str, name: Optional[str]) -> ChatSession:
    record = ChatSession(user_id=user_id, name=name or default_session_name())
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def list_sessions(
    session: Session,
    user_id: str,
    limit: Optional[int] = 50,
    offset: int = 0,
) -> list[ChatSession]:
    statement = (
        select(ChatSession)
        .where(ChatSession.user_id == user_id)
        .order_by(ChatSession.last_updated.desc())
    )
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def get_session(session: Session, session_id: str) -> Optional[ChatSession]:
    return session.exec(select(ChatSession).where(ChatSession.id == session_id)).first()


def get_user_session(session: Session, session_id: str, user_id: str) -> Optional[ChatSession]:
    record = get_session(session, session_id)
    if not record or record.user_id != user_id:
        return None
    return record


def rename_session(session: Session, record: ChatSession, name: str) -> ChatSession:
    record.name = name
    record.last_updated = utc_now()
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def delete_session(session: Session, record: ChatSession) -> None:
    messages = session.exec(select(ChatMessage).where(ChatMessage.session_id == record.id)).all()
    for message in messages:
        session.delete(message)
    session.delete(record)
    session.commit()


def add_message(
    session: Session,
    record: ChatSession,
    role: ChatRole,
    content: str,
    image_url: Optional[str] = None,
) -> ChatMessage:
    message = ChatMessage(
        session_id=record.id,
        role=role,
        content=content,
        image_url=image_url,
    )
    record.last_updated = utc_now()
    session.add(message)
    session.add(record)
    session.commit()
    session.refresh(message)
    return message


def list_messages(
    session: Session,
    session_id: str,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[ChatMessage]:
    statement = (
        select(ChatMessage)
        .where(ChatMessage.session_id == session_id)
        .order_by(ChatMessage.created_at.asc())
    )
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())
