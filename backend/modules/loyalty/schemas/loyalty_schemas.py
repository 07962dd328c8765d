# backend/modules/loyalty/schemas/loyalty_schemas.py

"""
Request and response models for scanning, memberships, activities and
business reporting.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from core.schemas import APIModel
from modules.brands.schemas import BrandSummary
from ..models.loyalty_models import ActivityType


# ========== Scanning ==========


class ScanRequest(APIModel):
    qr_data: str = Field(..., min_length=1, description="Raw JSON text decoded from the QR code")


class MembershipOut(APIModel):
    id: str
    user_id: str
    brand_id: str
    stamps: int
    joined_at: datetime
    last_stamp_at: Optional[datetime] = None


class MembershipWithBrand(MembershipOut):
    brand: BrandSummary


class StampResponse(APIModel):
    success: bool = True
    message: str
    membership: MembershipOut
    brand: BrandSummary


class RedeemResponse(APIModel):
    success: bool = True
    message: str
    membership: MembershipOut
    reward: str


class QRCodeResponse(APIModel):
    qr_data: str
    expires_at: datetime


# ========== Customer activity ==========


class ActivityOut(APIModel):
    id: str
    user_id: str
    brand_id: str
    branch_id: str
    type: ActivityType
    delta: int
    created_at: datetime
    brand: Optional[BrandSummary] = None


class ActivityStats(APIModel):
    total_stamps_earned: int
    total_stamps_redeemed: int
    total_activities: int


# ========== Business reporting ==========


class TransactionType(str, Enum):
    ALL = "all"
    STAMP = "stamp"
    REDEEM = "redeem"


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class PeriodSummary(APIModel):
    stamps: int
    redeems: int
    customers: int


class TodaySummary(PeriodSummary):
    stamps_change: float


class RecentTransaction(APIModel):
    id: str
    type: str
    customer: str
    branch: str
    time: datetime


class DashboardStats(APIModel):
    today: TodaySummary
    week: PeriodSummary
    month: PeriodSummary
    recent_transactions: List[RecentTransaction]


class CustomerSummary(APIModel):
    id: str
    name: str
    email: str
    current_stamps: int
    total_stamps: int
    total_redeems: int
    last_visit: datetime
    member_since: datetime


class TransactionOut(APIModel):
    id: str
    type: str
    customer_name: str
    customer_email: str
    branch_name: str
    timestamp: datetime
    staff_name: Optional[str] = None


class HourlyActivity(APIModel):
    hour: str
    stamps: int


class StatisticsOut(APIModel):
    total_stamps: int
    total_redeems: int
    unique_customers: int
    avg_stamps_per_customer: float
    conversion_rate: float
    hourly_activity: List[HourlyActivity]
