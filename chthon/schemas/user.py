from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr
from chthon.core.tiers import TierLimits
from chthon.models.enums import UserRole, UserTier


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: str
    image: Optional[str] = None
    is_active: bool
    role: UserRole
    tier: UserTier
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    image: Optional[str] = None


class UserConfigOut(BaseModel):
    tier: UserTier
    tier_config: Optional[dict[str, Any]] = None
    limits: TierLimits
