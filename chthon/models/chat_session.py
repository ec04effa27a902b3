from datetime import datetime
from sqlmodel import Field, SQLModel
from chthon.models.base import IDModel, TIMESTAMP_TYPE, TimestampModel, utc_now


class ChatSession(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'chat_sessions'

    user_id: str = Field(index=True)
    name: str
    last_updated: datetime = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP_TYPE,
        sa_column_kwargs={"nullable": False},
        index=True,
    )
