"""
QR transaction engine.

Turns a scanned payload into a stamp (earn) or a reward (redeem) on the
customer's brand-wide membership. All checks that depend on the balance
run inside the ledger's per-membership transaction, so two tills scanning
the same customer at once cannot both succeed.
"""

import math
from datetime import datetime
from typing import Callable, Optional
import logging

from sqlalchemy.orm import Session

from core.config import settings
from modules.auth.models import BusinessUser, Customer
from modules.auth.permissions import StaffAction, authorize
from modules.brands.schemas import BrandSummary
from modules.brands.services.directory_service import DirectoryService
from ..models.loyalty_models import ActivityType
from ..exceptions import (
    CustomerNotFoundError,
    MembershipNotFoundError,
    InsufficientStampsError,
    TooFastError,
    WrongBrandError,
)
from ..schemas.loyalty_schemas import StampResponse, RedeemResponse, MembershipOut
from .ledger_service import LedgerService
from .qr_payload import ensure_fresh, parse_redeem_payload, parse_stamp_payload

logger = logging.getLogger(__name__)


def cooldown_remaining(
    last_stamp_at: Optional[datetime], now: datetime, cooldown_seconds: int
) -> int:
    """Whole seconds left before the next stamp is allowed, 0 when allowed"""
    if last_stamp_at is None:
        return 0
    elapsed = (now - last_stamp_at).total_seconds()
    if elapsed >= cooldown_seconds:
        return 0
    return math.ceil(cooldown_seconds - elapsed)


class ScanService:
    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = datetime.utcnow,
        qr_max_age_seconds: Optional[int] = None,
        cooldown_seconds: Optional[int] = None,
    ):
        self.db = db
        self.clock = clock
        self.ledger = LedgerService(db)
        self.directory = DirectoryService(db)
        self.qr_max_age_seconds = (
            settings.qr_max_age_seconds if qr_max_age_seconds is None else qr_max_age_seconds
        )
        self.cooldown_seconds = (
            settings.stamp_cooldown_seconds if cooldown_seconds is None else cooldown_seconds
        )

    def stamp(self, staff: BusinessUser, qr_data: str) -> StampResponse:
        """Add one stamp to the customer's membership at the staff's brand."""
        payload = parse_stamp_payload(qr_data)
        now = self.clock()
        ensure_fresh(payload.timestamp, now, self.qr_max_age_seconds)

        brand = self.directory.get_brand(staff.brand_id)
        authorize(staff, StaffAction.SCAN, brand)
        branch_id = self.directory.resolve_scan_branch(staff)

        if self.db.get(Customer, payload.user_id) is None:
            raise CustomerNotFoundError(payload.user_id)

        with self.ledger.membership_transaction(payload.user_id, brand.id):
            membership = self.ledger.get_or_create_membership(payload.user_id, brand.id, now)

            remaining = cooldown_remaining(membership.last_stamp_at, now, self.cooldown_seconds)
            if remaining:
                logger.warning(
                    f"Stamp for customer {payload.user_id} at brand {brand.id} rejected, "
                    f"cooldown {remaining}s remaining"
                )
                raise TooFastError(remaining)

            self.ledger.record_activity(
                membership, branch_id, ActivityType.EARN, 1, now, staff_id=staff.id
            )
            membership.last_stamp_at = now

        self.db.refresh(membership)
        logger.info(
            f"Stamp added for customer {membership.user_id} at brand {brand.id} "
            f"branch {branch_id} by {staff.id}: {membership.stamps}/{brand.stamps_required}"
        )
        return StampResponse(
            message=f"Stamp added! {membership.stamps}/{brand.stamps_required}",
            membership=MembershipOut.model_validate(membership),
            brand=BrandSummary.model_validate(brand),
        )

    def redeem(self, staff: BusinessUser, qr_data: str) -> RedeemResponse:
        """Exchange ``stamps_required`` stamps for the brand's reward."""
        payload = parse_redeem_payload(qr_data)

        if payload.brand_id != staff.brand_id:
            raise WrongBrandError(payload.brand_id)

        brand = self.directory.get_brand(staff.brand_id)
        authorize(staff, StaffAction.SCAN, brand)
        branch_id = self.directory.resolve_scan_branch(staff)

        now = self.clock()
        ensure_fresh(payload.timestamp, now, self.qr_max_age_seconds)

        with self.ledger.membership_transaction(payload.user_id, brand.id):
            membership = self.ledger.get_membership(payload.user_id, brand.id, for_update=True)
            if membership is None:
                raise MembershipNotFoundError(payload.user_id, brand.id)

            required = brand.stamps_required
            if membership.stamps < required:
                raise InsufficientStampsError(membership.stamps, required)

            self.ledger.record_activity(
                membership, branch_id, ActivityType.REDEEM, -required, now, staff_id=staff.id
            )

        self.db.refresh(membership)
        logger.info(
            f"Reward '{brand.reward_name}' redeemed for customer {membership.user_id} "
            f"at brand {brand.id} branch {branch_id} by {staff.id}, "
            f"balance now {membership.stamps}"
        )
        return RedeemResponse(
            message=f"{brand.reward_name} reward redeemed!",
            membership=MembershipOut.model_validate(membership),
            reward=brand.reward_name,
        )
