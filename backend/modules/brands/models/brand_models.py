# backend/modules/brands/models/brand_models.py

"""
Brand and branch models
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Float,
    ForeignKey,
    JSON,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import UUIDPrimaryKeyMixin, TimestampMixin

DEFAULT_LOYALTY_SETTINGS = {
    "isActive": True,
    "validityDays": 90,
    "maxStampsPerDay": 5,
}


class Brand(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Loyalty program tenant owning one reward policy"""

    __tablename__ = "brands"
    __table_args__ = (
        CheckConstraint("stamps_required >= 1", name="ck_brands_stamps_required_positive"),
    )

    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100))
    stamps_required = Column(Integer, nullable=False, default=10)
    reward_name = Column(String(255), nullable=False, default="Free coffee")
    loyalty_settings = Column(JSON, nullable=True)

    branches = relationship(
        "Branch",
        back_populates="brand",
        order_by="Branch.created_at",
    )
    staff = relationship("BusinessUser", back_populates="brand")

    @property
    def effective_loyalty_settings(self) -> dict:
        """Stored settings merged over the defaults"""
        return {**DEFAULT_LOYALTY_SETTINGS, **(self.loyalty_settings or {})}

    def __repr__(self):
        return f"<Brand(id={self.id}, name='{self.name}')>"


class Branch(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Physical location of a brand"""

    __tablename__ = "branches"

    brand_id = Column(String(36), ForeignKey("brands.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500))
    phone = Column(String(50))
    latitude = Column(Float)
    longitude = Column(Float)
    open_now = Column(Boolean, default=True, nullable=False)
    working_hours = Column(JSON)
    notification_settings = Column(JSON)

    brand = relationship("Brand", back_populates="branches")
    staff = relationship("BusinessUser", back_populates="branch")

    def __repr__(self):
        return f"<Branch(id={self.id}, name='{self.name}', brand_id={self.brand_id})>"
