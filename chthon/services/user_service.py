from typing import Optional
from loguru import logger
from sqlmodel import Session, select

from chthon.core.tiers import TierLimits, get_tier_limits
from chthon.models.analytics_record import AnalyticsRecord
from chthon.models.chat_message import ChatMessage
from chthon.models.chat_session import ChatSession
from chthon.models.enums import UserTier
from chthon.models.refresh_token import RefreshToken
from chthon.models.user import User
from chthon.schemas.admin import TierUpdate
from chthon.schemas.user import UserConfigOut, UserOut, UserUpdate


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        image=user.image,
        is_active=user.is_active,
        role=user.role,
        tier=user.tier,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def user_limits(user: User) -> TierLimits:
    return get_tier_limits(user.tier, user.tier_config)


def to_user_config_out(user: User) -> UserConfigOut:
    return UserConfigOut(tier=user.tier, tier_config=user.tier_config, limits=user_limits(user))


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.get('email')
    if email is not None and email != user.email:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing and existing.id != user.id:
            raise ValueError('Email already registered')
        user.email = email
    if data.get('name') is not None:
        user.name = data['name']
    if 'image' in data:
        user.image = data['image']

    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def get_user(session: Session, user_id: str) -> Optional[User]:
    return session.exec(select(User).where(User.id == user_id)).first()


def list_users(session: Session, limit: Optional[int] = None, offset: int = 0) -> list[User]:
    statement = select(User).order_by(User.created_at.desc())
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def apply_tier_update(session: Session, user_ids: list[str], updates: TierUpdate) -> int:
    """Set the tier of every listed user; unknown ids are skipped.

    For the ``custom`` tier the remaining fields of ``updates`` become the
    stored tier configuration; other tiers clear it.
    """
    users = session.exec(select(User).where(User.id.in_(user_ids))).all()
    custom_config = updates.custom_config() if updates.tier == UserTier.CUSTOM else {}
    for user in users:
        user.tier = updates.tier
        user.tier_config = custom_config or None
        session.add(user)
    session.commit()
    logger.info('admin.users.tier_updated', tier=updates.tier.value, count=len(users))
    return len(users)


def delete_user(session: Session, user: User) -> None:
    user_id = user.id
    chat_sessions = session.exec(select(ChatSession).where(ChatSession.user_id == user_id)).all()
    session_ids = [record.id for record in chat_sessions]
    if session_ids:
        messages = session.exec(select(ChatMessage).where(ChatMessage.session_id.in_(session_ids))).all()
        for message in messages:
            session.delete(message)
    for record in chat_sessions:
        session.delete(record)
    for token in session.exec(select(RefreshToken).where(RefreshToken.user_id == user_id)).all():
        session.delete(token)
    for record in session.exec(select(AnalyticsRecord).where(AnalyticsRecord.user_id == user_id)).all():
        record.user_id = None
        session.add(record)
    session.delete(user)
    session.commit()
    logger.info('admin.users.deleted', user_id=user_id)
