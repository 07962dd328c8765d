# backend/modules/auth/routes/auth_routes.py

"""
Customer authentication endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.database import get_db
from ..services.auth_service import AuthService
from ..schemas.auth_schemas import CustomerAuthResponse, LoginRequest, RegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=CustomerAuthResponse, status_code=status.HTTP_201_CREATED)
def register(register_data: RegisterRequest, db: Session = Depends(get_db)):
    """Create a customer account and return a customer token."""
    service = AuthService(db)
    customer = service.register_customer(
        register_data.email, register_data.password, register_data.name
    )
    return service.customer_session(customer)


@router.post("/login", response_model=CustomerAuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    service = AuthService(db)
    customer = service.authenticate_customer(login_data.email, login_data.password)
    return service.customer_session(customer)


@router.post("/demo", response_model=CustomerAuthResponse)
def demo_login(db: Session = Depends(get_db)):
    """Sign in as the shared demo customer."""
    service = AuthService(db)
    return service.customer_session(service.demo_login())
