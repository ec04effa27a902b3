from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from chthon.models.base import IDModel, TimestampModel
from chthon.models.enums import ChatRole, enum_column


class ChatMessage(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'chat_messages'

    session_id: str = Field(index=True)
    role: ChatRole = Field(sa_column=enum_column(ChatRole, 'chat_role'))
    content: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    image_url: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
