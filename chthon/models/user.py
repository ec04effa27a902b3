from typing import Any, Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from chthon.models.base import IDModel, TimestampModel
from chthon.models.enums import UserRole, UserTier, enum_column


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    email: str = Field(index=True, unique=True)
    name: str = ''
    hashed_password: Optional[str] = None
    image: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
    is_active: bool = True
    role: UserRole = Field(default=UserRole.USER, sa_column=enum_column(UserRole, 'user_role'))
    tier: UserTier = Field(
        default=UserTier.REGISTERED,
        sa_column=enum_column(UserTier, 'user_tier', index=True),
    )
    tier_config: Optional[dict[str, Any]] = Field(default=None, sa_column=sa.Column(sa.JSON()))
