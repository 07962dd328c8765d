# backend/modules/brands/schemas/brand_schemas.py

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from core.schemas import APIModel


class BranchBase(APIModel):
    name: str = Field(..., min_length=2, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    working_hours: Optional[Any] = None


class BranchCreate(BranchBase):
    notification_settings: Optional[Any] = None


class BranchUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    open_now: Optional[bool] = None
    working_hours: Optional[Any] = None
    notification_settings: Optional[Any] = None


class BranchOut(APIModel):
    id: str
    brand_id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    open_now: bool = True
    working_hours: Optional[Any] = None
    notification_settings: Optional[Any] = None
    created_at: Optional[datetime] = None


class BranchMutationResponse(APIModel):
    success: bool = True
    message: str
    branch: BranchOut


class BranchStats(APIModel):
    branch_id: str
    branch_name: str
    total_activities: int
    today_activities: int
    unique_customers: int


class BrandSummary(APIModel):
    id: str
    name: str
    category: Optional[str] = None
    stamps_required: int
    reward_name: str


class BrandOut(BrandSummary):
    branches: List[BranchOut] = []


class NearbyBranchOut(BranchOut):
    brand: BrandSummary
    distance_km: Optional[float] = None


class BusinessInfo(APIModel):
    name: str
    category: str = ""
    stamps_required: int
    reward_name: str
    email: str


class SettingsOut(APIModel):
    business_info: BusinessInfo
    branch: Optional[BranchOut] = None


class BusinessInfoUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)


class BranchSettingsUpdate(APIModel):
    address: Optional[str] = None
    phone: Optional[str] = None
    working_hours: Optional[Any] = None
    notification_settings: Optional[Any] = None


class SettingsUpdate(APIModel):
    business_info: Optional[BusinessInfoUpdate] = None
    branch: Optional[BranchSettingsUpdate] = None


class LoyaltyProgramOut(APIModel):
    stamps_required: int
    reward_name: str
    is_active: bool
    validity_days: int
    max_stamps_per_day: int


class LoyaltyProgramUpdate(APIModel):
    stamps_required: Optional[int] = Field(None, ge=1, le=100)
    reward_name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    validity_days: Optional[int] = Field(None, ge=1)
    max_stamps_per_day: Optional[int] = Field(None, ge=1)


class LoyaltyProgramUpdateResponse(APIModel):
    success: bool = True
    message: str
    loyalty: LoyaltyProgramOut
