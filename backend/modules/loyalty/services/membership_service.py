"""Customer-facing reads of the ledger and QR issuance."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from core.config import settings
from modules.auth.models import Customer
from modules.brands.services.directory_service import DirectoryService
from ..models.loyalty_models import Activity, ActivityType, Membership
from ..exceptions import MembershipNotFoundError
from ..schemas.loyalty_schemas import ActivityStats, QRCodeResponse
from .qr_payload import build_redeem_payload, build_stamp_payload, payload_expiry


class MembershipService:
    def __init__(self, db: Session):
        self.db = db

    def list_memberships(self, customer: Customer) -> List[Membership]:
        return (
            self.db.query(Membership)
            .options(joinedload(Membership.brand))
            .filter(Membership.user_id == customer.id)
            .order_by(Membership.joined_at.desc())
            .all()
        )

    def get_membership(self, customer: Customer, brand_id: str) -> Membership:
        membership = (
            self.db.query(Membership)
            .options(joinedload(Membership.brand))
            .filter(Membership.user_id == customer.id, Membership.brand_id == brand_id)
            .first()
        )
        if membership is None:
            raise MembershipNotFoundError(customer.id, brand_id)
        return membership

    def list_activities(
        self,
        customer: Customer,
        activity_type: Optional[ActivityType] = None,
        brand_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Activity]:
        query = (
            self.db.query(Activity)
            .options(joinedload(Activity.brand))
            .filter(Activity.user_id == customer.id)
        )
        if activity_type is not None:
            query = query.filter(Activity.type == activity_type)
        if brand_id is not None:
            query = query.filter(Activity.brand_id == brand_id)

        return (
            query.order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(limit or settings.default_activity_limit)
            .all()
        )

    def activity_stats(self, customer: Customer) -> ActivityStats:
        earned, redeemed, total = (
            self.db.query(
                func.coalesce(
                    func.sum(case((Activity.type == ActivityType.EARN, Activity.delta), else_=0)), 0
                ),
                func.coalesce(
                    func.sum(case((Activity.type == ActivityType.REDEEM, Activity.delta), else_=0)), 0
                ),
                func.count(Activity.id),
            )
            .filter(Activity.user_id == customer.id)
            .one()
        )
        return ActivityStats(
            total_stamps_earned=int(earned),
            total_stamps_redeemed=abs(int(redeemed)),
            total_activities=total,
        )

    def stamp_qr(self, customer: Customer, now: datetime) -> QRCodeResponse:
        """Earn payload for the customer's QR screen"""
        return QRCodeResponse(
            qr_data=build_stamp_payload(customer.id, customer.email, now),
            expires_at=payload_expiry(now, settings.qr_max_age_seconds),
        )

    def redeem_qr(self, customer: Customer, brand_id: str, now: datetime) -> QRCodeResponse:
        """Redeem payload, issued only where the customer holds a membership"""
        DirectoryService(self.db).get_brand(brand_id)
        self.get_membership(customer, brand_id)
        return QRCodeResponse(
            qr_data=build_redeem_payload(customer.id, brand_id, now),
            expires_at=payload_expiry(now, settings.qr_max_age_seconds),
        )
