"""
Loyalty ledger: membership balances and the append-only activity log.

Balance changes go through ``membership_transaction`` so that reading a
membership, checking it and writing the new balance together with its
ledger row happen as one serialized unit per (customer, brand).
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.locks import KeyedLock
from ..models.loyalty_models import Activity, ActivityType, Membership
from ..exceptions import LedgerInvariantError

logger = logging.getLogger(__name__)

membership_locks = KeyedLock("membership")


class LedgerService:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def membership_transaction(self, user_id: str, brand_id: str) -> Iterator[None]:
        """
        Serialize balance changes for one (customer, brand) pair.

        Commits when the block completes and rolls back when it raises, so
        a rejected scan leaves neither the balance nor the ledger changed.
        """
        with membership_locks.hold((user_id, brand_id)):
            try:
                yield
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

    def get_membership(
        self, user_id: str, brand_id: str, for_update: bool = False
    ) -> Optional[Membership]:
        query = self.db.query(Membership).filter(
            Membership.user_id == user_id, Membership.brand_id == brand_id
        )
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_or_create_membership(
        self, user_id: str, brand_id: str, now: Optional[datetime] = None
    ) -> Membership:
        """Fetch the locked membership row, creating it with zero stamps if absent"""
        membership = self.get_membership(user_id, brand_id, for_update=True)
        if membership is not None:
            return membership

        membership = Membership(
            user_id=user_id,
            brand_id=brand_id,
            stamps=0,
            joined_at=now or datetime.utcnow(),
        )
        self.db.add(membership)
        try:
            self.db.flush()
        except IntegrityError:
            # Another process created it first
            self.db.rollback()
            membership = self.get_membership(user_id, brand_id, for_update=True)
            if membership is None:
                raise
            return membership

        logger.info(f"Membership created for customer {user_id} at brand {brand_id}")
        return membership

    def record_activity(
        self,
        membership: Membership,
        branch_id: str,
        activity_type: ActivityType,
        delta: int,
        now: datetime,
        staff_id: Optional[str] = None,
    ) -> Activity:
        """
        Apply ``delta`` to the balance and append the matching ledger row.

        Must be called inside ``membership_transaction`` with a membership
        fetched under that transaction's lock.
        """
        new_balance = membership.stamps + delta
        if new_balance < 0:
            raise LedgerInvariantError(
                "Stamp balance cannot become negative",
                {"stamps": membership.stamps, "delta": delta},
            )

        membership.stamps = new_balance
        activity = Activity(
            user_id=membership.user_id,
            brand_id=membership.brand_id,
            branch_id=branch_id,
            staff_id=staff_id,
            type=activity_type,
            delta=delta,
            created_at=now,
        )
        self.db.add(activity)
        self.db.flush()
        return activity

    def ledger_balance(self, user_id: str, brand_id: str) -> int:
        """Sum of ledger deltas, which always equals the membership balance"""
        total = (
            self.db.query(func.coalesce(func.sum(Activity.delta), 0))
            .filter(Activity.user_id == user_id, Activity.brand_id == brand_id)
            .scalar()
        )
        return int(total)
