from datetime import datetime
from sqlmodel import Field, SQLModel
from chthon.models.base import IDModel, TIMESTAMP_TYPE, TimestampModel


class RefreshToken(IDModel, TimestampModel, SQLModel, table=True):
    """An issued refresh token, tracked by its JWT ``jti`` claim."""

    __tablename__ = 'refresh_tokens'

    jti: str = Field(index=True, unique=True)
    user_id: str = Field(index=True)
    expires_at: datetime = Field(sa_type=TIMESTAMP_TYPE, sa_column_kwargs={"nullable": False})
