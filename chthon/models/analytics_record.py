from typing import Any, Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from chthon.models.base import IDModel, TimestampModel
from chthon.models.enums import RequestType, enum_column


class AnalyticsRecord(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'analytics'

    user_id: Optional[str] = Field(default=None, index=True)
    provider: str = Field(index=True)
    model: str = Field(index=True)
    type: RequestType = Field(
        default=RequestType.TEXT,
        sa_column=enum_column(RequestType, 'request_type'),
    )
    cost: float = 0.0
    tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    processing_time: float = 0.0
    success: bool = True
    error: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
    user_tier: Optional[str] = Field(default=None, index=True)
    provider_details: Optional[dict[str, Any]] = Field(default=None, sa_column=sa.Column(sa.JSON()))
    request_size: Optional[int] = None
    response_size: Optional[int] = None
