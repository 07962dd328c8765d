# backend/modules/auth/routes/business_auth_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.deps import Clock, get_clock
from ..services.auth_service import AuthService
from ..schemas.auth_schemas import BusinessAuthResponse, LoginRequest

router = APIRouter(prefix="/business-auth", tags=["Business Authentication"])


@router.post("/login", response_model=BusinessAuthResponse)
def business_login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Authenticate an owner, branch manager or staff member."""
    service = AuthService(db)
    business_user = service.authenticate_staff(login_data.email, login_data.password, clock())
    return service.business_session(business_user)
