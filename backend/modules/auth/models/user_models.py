# backend/modules/auth/models/user_models.py

"""
Identity models: consumers and business staff.

The two principal kinds live in separate tables and never share
credentials or tokens.
"""

import enum

from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Enum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class BusinessRole(str, enum.Enum):
    """Closed set of business roles, from widest to narrowest scope"""

    OWNER = "OWNER"
    BRANCH_MANAGER = "BRANCH_MANAGER"
    STAFF = "STAFF"


class Customer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Loyalty program consumer"""

    __tablename__ = "customers"

    email = Column(String(255), unique=True, nullable=False, index=True)
    # Null for accounts created without a password (demo login)
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255))
    phone = Column(String(50))

    memberships = relationship("Membership", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"


class BusinessUser(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Brand owner, branch manager or staff account"""

    __tablename__ = "business_users"
    __table_args__ = (
        CheckConstraint(
            "(role = 'OWNER' AND branch_id IS NULL) OR "
            "(role <> 'OWNER' AND branch_id IS NOT NULL)",
            name="ck_business_users_role_branch_scope",
        ),
    )

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(
        Enum(BusinessRole, name="business_role", native_enum=False, length=20),
        nullable=False,
        default=BusinessRole.STAFF,
    )
    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=False, index=True)
    branch_id = Column(String(36), ForeignKey("branches.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(36), ForeignKey("business_users.id"), nullable=True, index=True)
    last_login_at = Column(DateTime, nullable=True)

    brand = relationship("Brand", back_populates="staff")
    branch = relationship("Branch", back_populates="staff")
    creator = relationship("BusinessUser", remote_side="BusinessUser.id")

    def __repr__(self):
        return f"<BusinessUser(id={self.id}, email='{self.email}', role={self.role})>"
