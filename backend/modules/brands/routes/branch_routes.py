# backend/modules/brands/routes/branch_routes.py

"""
Branch directory routes for the business dashboard.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import Clock, get_clock, get_current_business_user
from core.schemas import MessageResponse
from modules.auth.models import BusinessUser

from ..services.directory_service import DirectoryService
from ..schemas.brand_schemas import (
    BranchCreate,
    BranchUpdate,
    BranchOut,
    BranchMutationResponse,
    BranchStats,
)

router = APIRouter(prefix="/business/branches", tags=["Business Branches"])


@router.get("", response_model=List[BranchOut])
def list_branches(
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    return DirectoryService(db).list_branches(business_user)


@router.post("", response_model=BranchMutationResponse, status_code=status.HTTP_201_CREATED)
def create_branch(
    branch_data: BranchCreate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    branch = DirectoryService(db).create_branch(business_user, branch_data)
    return BranchMutationResponse(message="Branch created successfully", branch=branch)


@router.put("/{branch_id}", response_model=BranchMutationResponse)
def update_branch(
    branch_id: str,
    branch_data: BranchUpdate,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    branch = DirectoryService(db).update_branch(business_user, branch_id, branch_data)
    return BranchMutationResponse(message="Branch updated successfully", branch=branch)


@router.delete("/{branch_id}", response_model=MessageResponse)
def delete_branch(
    branch_id: str,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
):
    DirectoryService(db).delete_branch(business_user, branch_id)
    return MessageResponse(message="Branch deleted successfully")


@router.get("/{branch_id}/stats", response_model=BranchStats)
def get_branch_stats(
    branch_id: str,
    db: Session = Depends(get_db),
    business_user: BusinessUser = Depends(get_current_business_user),
    clock: Clock = Depends(get_clock),
):
    return DirectoryService(db).branch_stats(business_user, branch_id, clock())
