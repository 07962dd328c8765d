"""
Identity and credential store.

Customers and business users are looked up, created and verified here.
Token issuance is delegated to ``core.auth``.
"""

from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.orm import Session, joinedload

from core.auth import PrincipalKind, create_access_token, hash_password, verify_password
from core.config import settings
from core.exceptions import AccountDisabledError, DuplicateEmailError, ForbiddenError
from ..models.user_models import BusinessUser, Customer
from ..exceptions import AccountNotFoundError, InvalidCredentialError
from ..schemas.auth_schemas import (
    BusinessAuthResponse,
    BusinessUserOut,
    CustomerAuthResponse,
    CustomerOut,
    CustomerProfileUpdate,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _find_customer(self, email: str) -> Optional[Customer]:
        return self.db.query(Customer).filter(Customer.email == normalize_email(email)).first()

    def register_customer(
        self, email: str, password: str, name: Optional[str] = None
    ) -> Customer:
        """Create a customer; the name defaults to the e-mail local part"""
        email = normalize_email(email)
        if self._find_customer(email) is not None:
            raise DuplicateEmailError(email)

        customer = Customer(
            email=email,
            name=name or email.split("@")[0],
            password_hash=hash_password(password),
        )
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)

        logger.info(f"Customer {customer.id} registered")
        return customer

    def authenticate_customer(self, email: str, password: str) -> Customer:
        customer = self._find_customer(email)
        if customer is None:
            raise AccountNotFoundError(normalize_email(email))
        if not verify_password(password, customer.password_hash):
            logger.warning(f"Failed login for customer {customer.id}")
            raise InvalidCredentialError()
        return customer

    def authenticate_staff(
        self, email: str, password: str, now: Optional[datetime] = None
    ) -> BusinessUser:
        """
        Verify business credentials and stamp ``last_login_at``.

        The password is checked before the active flag so a disabled
        account is only revealed to someone holding its password.
        """
        business_user = (
            self.db.query(BusinessUser)
            .options(joinedload(BusinessUser.brand), joinedload(BusinessUser.branch))
            .filter(BusinessUser.email == normalize_email(email))
            .first()
        )
        if business_user is None:
            raise AccountNotFoundError(normalize_email(email))
        if not verify_password(password, business_user.password_hash):
            logger.warning(f"Failed login for business user {business_user.id}")
            raise InvalidCredentialError()
        if not business_user.is_active:
            raise AccountDisabledError("Your account has been disabled")

        business_user.last_login_at = now or datetime.utcnow()
        self.db.commit()
        self.db.refresh(business_user)

        logger.info(f"Business user {business_user.id} logged in")
        return business_user

    def demo_login(self) -> Customer:
        """Get or create the password-less demo customer"""
        if not settings.demo_login_enabled:
            raise ForbiddenError("Demo login is disabled")

        customer = self._find_customer(settings.demo_customer_email)
        if customer is None:
            customer = Customer(
                email=normalize_email(settings.demo_customer_email),
                name=settings.demo_customer_name,
                phone=settings.demo_customer_phone,
            )
            self.db.add(customer)
            self.db.commit()
            self.db.refresh(customer)
            logger.info(f"Demo customer {customer.id} created")
        return customer

    def update_profile(self, customer: Customer, data: CustomerProfileUpdate) -> Customer:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes:
            email = normalize_email(changes["email"])
            existing = self._find_customer(email)
            if existing is not None and existing.id != customer.id:
                raise DuplicateEmailError(email)
            customer.email = email
        if "name" in changes:
            customer.name = changes["name"]
        if "phone" in changes:
            customer.phone = changes["phone"]

        self.db.commit()
        self.db.refresh(customer)
        return customer

    @staticmethod
    def customer_session(customer: Customer) -> CustomerAuthResponse:
        return CustomerAuthResponse(
            user=CustomerOut.model_validate(customer),
            token=create_access_token(customer.id, PrincipalKind.CUSTOMER),
        )

    @staticmethod
    def business_session(business_user: BusinessUser) -> BusinessAuthResponse:
        return BusinessAuthResponse(
            business_user=BusinessUserOut.model_validate(business_user),
            token=create_access_token(business_user.id, PrincipalKind.BUSINESS),
        )
