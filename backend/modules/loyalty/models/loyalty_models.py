# backend/modules/loyalty/models/loyalty_models.py

"""
Loyalty ledger models.

``Membership`` is the current stamp balance per (customer, brand);
``Activity`` is the append-only ledger whose deltas always sum to that
balance.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Enum,
    CheckConstraint,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import UUIDPrimaryKeyMixin


class ActivityType(str, enum.Enum):
    EARN = "earn"
    REDEEM = "redeem"


class Membership(Base, UUIDPrimaryKeyMixin):
    """Stamp balance of one customer at one brand, shared by all branches"""

    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "brand_id", name="uq_memberships_user_brand"),
        CheckConstraint("stamps >= 0", name="ck_memberships_stamps_non_negative"),
    )

    user_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=False, index=True)
    stamps = Column(Integer, nullable=False, default=0)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_stamp_at = Column(DateTime, nullable=True)

    customer = relationship("Customer", back_populates="memberships")
    brand = relationship("Brand")

    def __repr__(self):
        return (
            f"<Membership(user_id={self.user_id}, brand_id={self.brand_id}, "
            f"stamps={self.stamps})>"
        )


class Activity(Base, UUIDPrimaryKeyMixin):
    """Immutable ledger entry for one earn or redeem"""

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_brand_created", "brand_id", "created_at"),
        Index("ix_activities_branch_created", "branch_id", "created_at"),
        Index("ix_activities_user_brand", "user_id", "brand_id"),
    )

    user_id = Column(String(36), ForeignKey("customers.id"), nullable=False)
    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=False)
    branch_id = Column(String(36), ForeignKey("branches.id"), nullable=False)
    staff_id = Column(String(36), ForeignKey("business_users.id"), nullable=True)
    type = Column(
        Enum(
            ActivityType,
            name="activity_type",
            native_enum=False,
            length=10,
            values_callable=lambda obj: [e.value for e in obj],
        ),
        nullable=False,
    )
    delta = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    customer = relationship("Customer")
    brand = relationship("Brand")
    branch = relationship("Branch")
    staff = relationship("BusinessUser")

    def __repr__(self):
        return f"<Activity(id={self.id}, type={self.type}, delta={self.delta})>"
