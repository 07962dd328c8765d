# backend/modules/loyalty/routes/membership_routes.py

"""
Customer wallet: memberships, activity history and QR codes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import Clock, get_clock, get_current_customer
from modules.auth.models import Customer

from ..models.loyalty_models import ActivityType
from ..services.membership_service import MembershipService
from ..schemas.loyalty_schemas import (
    MembershipWithBrand,
    ActivityOut,
    ActivityStats,
    QRCodeResponse,
)

membership_router = APIRouter(prefix="/memberships", tags=["Memberships"])
activity_router = APIRouter(prefix="/activities", tags=["Activities"])
qr_router = APIRouter(prefix="/qr", tags=["QR"])


@membership_router.get("", response_model=List[MembershipWithBrand])
def list_memberships(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    return MembershipService(db).list_memberships(customer)


@membership_router.get("/{brand_id}", response_model=MembershipWithBrand)
def get_membership(
    brand_id: str,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    return MembershipService(db).get_membership(customer, brand_id)


@activity_router.get("", response_model=List[ActivityOut])
def list_activities(
    type: Optional[ActivityType] = Query(None),
    brand_id: Optional[str] = Query(None, alias="brandId"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    return MembershipService(db).list_activities(customer, type, brand_id, limit)


@activity_router.get("/stats", response_model=ActivityStats)
def get_activity_stats(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    return MembershipService(db).activity_stats(customer)


@qr_router.get("/stamp", response_model=QRCodeResponse)
def get_stamp_qr(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
    clock: Clock = Depends(get_clock),
):
    return MembershipService(db).stamp_qr(customer, clock())


@qr_router.get("/redeem/{brand_id}", response_model=QRCodeResponse)
def get_redeem_qr(
    brand_id: str,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
    clock: Clock = Depends(get_clock),
):
    return MembershipService(db).redeem_qr(customer, brand_id, clock())
