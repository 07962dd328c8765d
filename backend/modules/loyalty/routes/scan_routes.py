# backend/modules/loyalty/routes/scan_routes.py

"""
QR scanning endpoints used by business tills.

Handlers are synchronous so each request runs in the threadpool and
blocks only on its own membership lock.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import Clock, get_clock, get_current_business_user
from modules.auth.models import BusinessUser

from ..services.scan_service import ScanService
from ..schemas.loyalty_schemas import ScanRequest, StampResponse, RedeemResponse

router = APIRouter(prefix="/scan", tags=["Scan"])


@router.post("/stamp", response_model=StampResponse)
def scan_stamp(
    scan_data: ScanRequest,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    """Add a stamp from a customer's earn QR code."""
    return ScanService(db, clock=clock).stamp(business_user, scan_data.qr_data)


@router.post("/redeem", response_model=RedeemResponse)
def scan_redeem(
    scan_data: ScanRequest,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    """Redeem the brand's reward from a customer's redeem QR code."""
    return ScanService(db, clock=clock).redeem(business_user, scan_data.qr_data)
