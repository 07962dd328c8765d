# backend/modules/auth/routes/user_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import get_current_customer
from ..models.user_models import Customer
from ..services.auth_service import AuthService
from ..schemas.auth_schemas import CustomerProfile, CustomerProfileUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=CustomerProfile)
def get_me(customer: Customer = Depends(get_current_customer)):
    return customer


@router.patch("/me", response_model=CustomerProfile)
def update_me(
    profile_data: CustomerProfileUpdate,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    return AuthService(db).update_profile(customer, profile_data)
