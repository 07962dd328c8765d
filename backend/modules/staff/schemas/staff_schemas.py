from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from core.schemas import APIModel
from modules.auth.models import BusinessRole


class StaffCreate(APIModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: BusinessRole
    branch_id: Optional[str] = None


class StaffUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    role: Optional[BusinessRole] = None
    is_active: Optional[bool] = None
    branch_id: Optional[str] = None


class ResetPasswordRequest(APIModel):
    new_password: str = Field(..., min_length=6, max_length=128)


class StaffBrandRef(APIModel):
    id: str
    name: str


class StaffBranchRef(APIModel):
    id: str
    name: str


class StaffOut(APIModel):
    id: str
    email: str
    name: str
    role: BusinessRole
    is_active: bool
    created_by: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    brand: Optional[StaffBrandRef] = None
    branch: Optional[StaffBranchRef] = None


class StaffMutationResponse(APIModel):
    success: bool = True
    message: str
    staff: StaffOut
