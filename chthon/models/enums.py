from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class UserTier(str, Enum):
    REGISTERED = 'registered'
    PREMIUM = 'premium'
    CUSTOM = 'custom'


class ChatRole(str, Enum):
    USER = 'user'
    ASSISTANT = 'assistant'
    SYSTEM = 'system'


class RequestType(str, Enum):
    TEXT = 'text'
    IMAGE = 'image'


def enum_column(enum_cls: type[Enum], name: str, **kwargs) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=False,
        **kwargs,
    )
