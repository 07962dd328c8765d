# backend/modules/loyalty/routes/business_stats_routes.py

"""
Business dashboard reporting routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import Clock, get_clock, get_current_business_user
from modules.auth.models import BusinessUser

from ..services.stats_service import StatsService
from ..schemas.loyalty_schemas import (
    CustomerSummary,
    DashboardStats,
    DateRange,
    StatisticsOut,
    TransactionOut,
    TransactionType,
)

router = APIRouter(prefix="/business", tags=["Business Reports"])


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    return StatsService(db).dashboard(business_user, clock())


@router.get("/customers", response_model=List[CustomerSummary])
def list_customers(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    return StatsService(db).customers(business_user)


@router.get("/transactions", response_model=List[TransactionOut])
def list_transactions(
    type: TransactionType = Query(TransactionType.ALL),
    date_range: DateRange = Query(DateRange.ALL, alias="dateRange"),
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    return StatsService(db).transactions(business_user, clock(), type, date_range, search)


@router.get("/statistics", response_model=StatisticsOut)
def get_statistics(
    date_range: DateRange = Query(DateRange.WEEK, alias="dateRange"),
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    return StatsService(db).statistics(business_user, clock(), date_range)
