from typing import Optional
from pydantic import BaseModel, Field
from chthon.models.enums import UserTier
from chthon.schemas.analytics import AnalyticsRecordOut, AnalyticsSummary
from chthon.schemas.user import UserOut


class AdminAuthRequest(BaseModel):
    admin_key: str


class TierUpdate(BaseModel):
    tier: UserTier
    max_tokens: Optional[int] = Field(default=None, gt=0)
    can_select_provider: Optional[bool] = None
    can_upload_images: Optional[bool] = None
    available_providers: Optional[list[str]] = Field(default=None, min_length=1)

    def custom_config(self) -> dict:
        return self.model_dump(exclude={'tier'}, exclude_none=True)


class UserBulkUpdate(BaseModel):
    user_ids: list[str] = []
    updates: Optional[TierUpdate] = None


class UserBulkUpdateOut(BaseModel):
    success: bool
    updated_count: int


class AdminUsersOut(BaseModel):
    users: list[UserOut]


class AdminAnalyticsOut(BaseModel):
    records: list[AnalyticsRecordOut]
    summary: AnalyticsSummary
