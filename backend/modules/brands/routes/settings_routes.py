# backend/modules/brands/routes/settings_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import get_current_business_user
from core.schemas import MessageResponse
from modules.auth.models import BusinessUser

from ..services.settings_service import SettingsService
from ..schemas.brand_schemas import (
    SettingsOut,
    SettingsUpdate,
    LoyaltyProgramOut,
    LoyaltyProgramUpdate,
    LoyaltyProgramUpdateResponse,
)

router = APIRouter(prefix="/business", tags=["Business Settings"])


@router.get("/settings", response_model=SettingsOut)
def get_settings(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    return SettingsService(db).get_settings(business_user)


@router.put("/settings", response_model=MessageResponse)
def update_settings(
    settings_data: SettingsUpdate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    SettingsService(db).update_settings(business_user, settings_data)
    return MessageResponse(message="Settings updated successfully")


@router.get("/loyalty", response_model=LoyaltyProgramOut)
def get_loyalty_program(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    return SettingsService(db).get_loyalty_program(business_user)


@router.put("/loyalty", response_model=LoyaltyProgramUpdateResponse)
def update_loyalty_program(
    loyalty_data: LoyaltyProgramUpdate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    loyalty = SettingsService(db).update_loyalty_program(business_user, loyalty_data)
    return LoyaltyProgramUpdateResponse(
        message="Loyalty program updated successfully", loyalty=loyalty
    )
