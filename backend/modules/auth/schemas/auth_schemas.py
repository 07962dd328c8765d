# backend/modules/auth/schemas/auth_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from core.schemas import APIModel
from ..models.user_models import BusinessRole


class RegisterRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(None, max_length=255)


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class CustomerOut(APIModel):
    id: str
    email: str
    phone: Optional[str] = None
    name: Optional[str] = None


class CustomerProfile(CustomerOut):
    created_at: Optional[datetime] = None


class CustomerProfileUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)


class CustomerAuthResponse(APIModel):
    user: CustomerOut
    token: str


class BrandRef(APIModel):
    id: str
    name: str
    category: Optional[str] = None
    stamps_required: int
    reward_name: str


class BranchRef(APIModel):
    id: str
    name: str
    address: Optional[str] = None


class BusinessUserOut(APIModel):
    id: str
    email: str
    name: str
    role: BusinessRole
    brand_id: str
    branch_id: Optional[str] = None
    brand: Optional[BrandRef] = None
    branch: Optional[BranchRef] = None


class BusinessAuthResponse(APIModel):
    business_user: BusinessUserOut
    token: str
