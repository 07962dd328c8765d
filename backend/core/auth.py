"""
Authentication primitives for the stamp card API.

Provides password hashing, JWT issuance and verification, and the FastAPI
dependencies that resolve the calling customer or business user from a
bearer token. Customer and business tokens carry a ``kind`` claim and are
never accepted in place of one another.
"""

import enum
import secrets
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .exceptions import (
    AuthenticationError,
    InvalidOrExpiredTokenError,
    AccountDisabledError,
    ForbiddenError,
    NotFoundError,
)
from modules.auth.models import BusinessRole, Customer, BusinessUser

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)
security = HTTPBearer(auto_error=False)


class PrincipalKind(str, enum.Enum):
    CUSTOMER = "customer"
    BUSINESS = "business"


class TokenData(BaseModel):
    """Verified token payload."""

    principal_id: str
    kind: PrincipalKind
    token_id: Optional[str] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Compare a candidate password against a stored hash.

    Accounts without a stored hash (demo customers) never match.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def generate_token_id() -> str:
    """Generate a unique token ID for tracking."""
    return secrets.token_urlsafe(16)


def create_access_token(
    principal_id: str,
    kind: PrincipalKind,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a bearer token binding the principal id and kind."""
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(days=settings.token_expire_days))
    to_encode = {
        "sub": str(principal_id),
        "kind": PrincipalKind(kind).value,
        "iat": now,
        "exp": expire,
        "jti": generate_token_id(),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenData:
    """
    Verify and decode a JWT.

    Raises:
        InvalidOrExpiredTokenError: on bad signature, expiry or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise InvalidOrExpiredTokenError()
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise InvalidOrExpiredTokenError()

    try:
        kind = PrincipalKind(payload.get("kind"))
    except ValueError:
        raise InvalidOrExpiredTokenError()

    sub = payload.get("sub")
    if not sub:
        raise InvalidOrExpiredTokenError()

    return TokenData(principal_id=sub, kind=kind, token_id=payload.get("jti"))


def _require_token(
    credentials: Optional[HTTPAuthorizationCredentials], kind: PrincipalKind
) -> TokenData:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    token_data = verify_token(credentials.credentials)
    if token_data.kind != kind:
        logger.warning(
            f"Token kind mismatch: expected {kind.value}, got {token_data.kind.value}"
        )
        raise InvalidOrExpiredTokenError()
    return token_data


def get_current_token_customer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenData:
    return _require_token(credentials, PrincipalKind.CUSTOMER)


def get_current_customer(
    token_data: TokenData = Depends(get_current_token_customer),
    db: Session = Depends(get_db),
) -> Customer:
    """Resolve the calling customer from a customer token."""
    customer = db.get(Customer, token_data.principal_id)
    if customer is None:
        raise NotFoundError("Customer", token_data.principal_id, "User not found")
    return customer


def get_current_business_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> BusinessUser:
    """Resolve the calling brand owner, manager or staff member."""
    token_data = _require_token(credentials, PrincipalKind.BUSINESS)

    business_user = db.get(BusinessUser, token_data.principal_id)
    if business_user is None:
        raise NotFoundError("BusinessUser", token_data.principal_id, "Business user not found")
    if not business_user.is_active:
        raise AccountDisabledError()
    return business_user


def require_role(*roles: BusinessRole):
    """Dependency factory gating an endpoint to the given business roles."""
    allowed = {BusinessRole(r) for r in roles}

    def check(business_user: BusinessUser = Depends(get_current_business_user)) -> BusinessUser:
        if business_user.role not in allowed:
            raise ForbiddenError(
                "You do not have permission for this action",
                {"requiredRoles": sorted(r.value for r in allowed)},
            )
        return business_user

    return check


require_owner = require_role(BusinessRole.OWNER)
require_manager = require_role(BusinessRole.OWNER, BusinessRole.BRANCH_MANAGER)
