from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from chthon.models.enums import RequestType


class AnalyticsRecordOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    provider: str
    model: str
    type: RequestType
    cost: float
    tokens: int
    prompt_tokens: int
    completion_tokens: int
    processing_time: float
    success: bool
    error: Optional[str] = None
    user_tier: Optional[str] = None
    provider_details: Optional[dict[str, Any]] = None
    request_size: Optional[int] = None
    response_size: Optional[int] = None
    created_at: datetime


class UsageBucket(BaseModel):
    requests: int = 0
    cost: float = 0.0
    tokens: int = 0


class ProviderBucket(UsageBucket):
    success_rate: float = 0.0


class AnalyticsSummary(BaseModel):
    total_cost: float = 0.0
    total_tokens: int = 0
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    success_rate: float = 0.0
    provider_stats: dict[str, ProviderBucket] = Field(default_factory=dict)
    model_stats: dict[str, UsageBucket] = Field(default_factory=dict)
    type_stats: dict[str, UsageBucket] = Field(default_factory=dict)
    tier_stats: dict[str, UsageBucket] = Field(default_factory=dict)
    daily_usage: dict[str, UsageBucket] = Field(default_factory=dict)
    provider_details_summary: dict[str, UsageBucket] = Field(default_factory=dict)
