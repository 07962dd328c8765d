# backend/modules/staff/routes/staff_routes.py

"""
Staff management routes for the business dashboard.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import get_current_business_user, require_manager, require_owner
from core.schemas import MessageResponse
from modules.auth.models import BusinessUser

from ..services.staff_service import StaffService
from ..schemas.staff_schemas import (
    StaffCreate,
    StaffUpdate,
    StaffOut,
    StaffMutationResponse,
    ResetPasswordRequest,
)

router = APIRouter(prefix="/business/staff", tags=["Business Staff"])


@router.get("", response_model=List[StaffOut])
def list_staff(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    return StaffService(db).list_staff(business_user)


@router.post("", response_model=StaffMutationResponse, status_code=status.HTTP_201_CREATED)
def create_staff(
    staff_data: StaffCreate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(require_manager),
):
    staff = StaffService(db).create_staff(business_user, staff_data)
    return StaffMutationResponse(message="Staff member created successfully", staff=staff)


@router.put("/{staff_id}", response_model=StaffMutationResponse)
def update_staff(
    staff_id: str,
    staff_data: StaffUpdate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(require_manager),
):
    staff = StaffService(db).update_staff(business_user, staff_id, staff_data)
    return StaffMutationResponse(message="Staff member updated successfully", staff=staff)


@router.delete("/{staff_id}", response_model=MessageResponse)
def deactivate_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(require_manager),
):
    StaffService(db).deactivate_staff(business_user, staff_id)
    return MessageResponse(message="Staff member deactivated successfully")


@router.post("/{staff_id}/activate", response_model=MessageResponse)
def activate_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(require_owner),
):
    StaffService(db).activate_staff(business_user, staff_id)
    return MessageResponse(message="Staff member activated successfully")


@router.post("/{staff_id}/reset-password", response_model=MessageResponse)
def reset_staff_password(
    staff_id: str,
    reset_data: ResetPasswordRequest,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(require_manager),
):
    StaffService(db).reset_password(business_user, staff_id, reset_data.new_password)
    return MessageResponse(message="Password reset successfully")
