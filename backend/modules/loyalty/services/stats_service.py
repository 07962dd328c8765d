"""
Business reporting over the activity ledger.

Every figure is computed with range queries against ``activities`` and
``memberships``. Owners see their whole brand; branch managers and staff
see only activity recorded at their own branch.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Query, Session

from core.config import settings
from modules.auth.models import BusinessRole, BusinessUser, Customer
from modules.auth.permissions import StaffAction, authorize
from modules.brands.models import Branch
from modules.brands.services.directory_service import DirectoryService, start_of_day
from ..models.loyalty_models import Activity, ActivityType, Membership
from ..schemas.loyalty_schemas import (
    CustomerSummary,
    DashboardStats,
    DateRange,
    HourlyActivity,
    PeriodSummary,
    RecentTransaction,
    StatisticsOut,
    TodaySummary,
    TransactionOut,
    TransactionType,
)

BUSINESS_HOURS = range(9, 19)

_earn_count = func.count(case((Activity.type == ActivityType.EARN, 1)))
_redeem_count = func.count(case((Activity.type == ActivityType.REDEEM, 1)))
_customer_count = func.count(func.distinct(Activity.user_id))


def transaction_label(activity_type: ActivityType) -> str:
    """Dashboard wording: earns are shown as stamps"""
    return "stamp" if activity_type == ActivityType.EARN else "redeem"


def change_percent(today: int, yesterday: int) -> float:
    if yesterday > 0:
        return round((today - yesterday) / yesterday * 100, 1)
    return 100.0 if today > 0 else 0.0


def range_start(date_range: DateRange, now: datetime) -> Optional[datetime]:
    today = start_of_day(now)
    if date_range == DateRange.TODAY:
        return today
    if date_range == DateRange.WEEK:
        return today - timedelta(days=7)
    if date_range == DateRange.MONTH:
        return today - timedelta(days=30)
    return None


class StatsService:
    def __init__(self, db: Session):
        self.db = db
        self.directory = DirectoryService(db)

    def _authorize(self, actor: BusinessUser, action: StaffAction) -> None:
        authorize(actor, action, self.directory.get_brand(actor.brand_id))

    @staticmethod
    def _scope(query: Query, actor: BusinessUser) -> Query:
        query = query.filter(Activity.brand_id == actor.brand_id)
        if actor.role != BusinessRole.OWNER and actor.branch_id:
            query = query.filter(Activity.branch_id == actor.branch_id)
        return query

    def _period(
        self, actor: BusinessUser, start: datetime, end: Optional[datetime] = None
    ) -> PeriodSummary:
        query = self._scope(
            self.db.query(_earn_count, _redeem_count, _customer_count), actor
        ).filter(Activity.created_at >= start)
        if end is not None:
            query = query.filter(Activity.created_at < end)
        stamps, redeems, customers = query.one()
        return PeriodSummary(stamps=stamps, redeems=redeems, customers=customers)

    def dashboard(self, actor: BusinessUser, now: datetime) -> DashboardStats:
        self._authorize(actor, StaffAction.VIEW_DASHBOARD)

        today = start_of_day(now)
        today_summary = self._period(actor, today)
        yesterday_summary = self._period(actor, today - timedelta(days=1), today)

        recent = (
            self._scope(
                self.db.query(Activity, Customer.name, Customer.email, Branch.name)
                .join(Customer, Customer.id == Activity.user_id)
                .outerjoin(Branch, Branch.id == Activity.branch_id),
                actor,
            )
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(settings.recent_transactions_limit)
            .all()
        )

        return DashboardStats(
            today=TodaySummary(
                **today_summary.model_dump(),
                stamps_change=change_percent(today_summary.stamps, yesterday_summary.stamps),
            ),
            week=self._period(actor, today - timedelta(days=7)),
            month=self._period(actor, today - timedelta(days=30)),
            recent_transactions=[
                RecentTransaction(
                    id=activity.id,
                    type=transaction_label(activity.type),
                    customer=customer_name or customer_email or "Unknown",
                    branch=branch_name or "Unknown",
                    time=activity.created_at,
                )
                for activity, customer_name, customer_email, branch_name in recent
            ],
        )

    def customers(self, actor: BusinessUser) -> List[CustomerSummary]:
        """Every member of the actor's brand with lifetime earn/redeem counts"""
        self._authorize(actor, StaffAction.VIEW_CUSTOMERS)

        totals = (
            self.db.query(
                Activity.user_id.label("user_id"),
                _earn_count.label("total_stamps"),
                _redeem_count.label("total_redeems"),
            )
            .filter(Activity.brand_id == actor.brand_id)
            .group_by(Activity.user_id)
            .subquery()
        )

        rows = (
            self.db.query(
                Membership,
                Customer,
                func.coalesce(totals.c.total_stamps, 0),
                func.coalesce(totals.c.total_redeems, 0),
            )
            .join(Customer, Customer.id == Membership.user_id)
            .outerjoin(totals, totals.c.user_id == Membership.user_id)
            .filter(Membership.brand_id == actor.brand_id)
            .order_by(Membership.last_stamp_at.desc().nulls_last(), Membership.joined_at.desc())
            .all()
        )

        return [
            CustomerSummary(
                id=customer.id,
                name=customer.name or customer.email or "Unknown",
                email=customer.email or "",
                current_stamps=membership.stamps,
                total_stamps=total_stamps,
                total_redeems=total_redeems,
                last_visit=membership.last_stamp_at or membership.joined_at,
                member_since=membership.joined_at,
            )
            for membership, customer, total_stamps, total_redeems in rows
        ]

    def transactions(
        self,
        actor: BusinessUser,
        now: datetime,
        transaction_type: TransactionType = TransactionType.ALL,
        date_range: DateRange = DateRange.ALL,
        search: Optional[str] = None,
    ) -> List[TransactionOut]:
        self._authorize(actor, StaffAction.VIEW_DASHBOARD)

        query = self._scope(
            self.db.query(Activity, Customer, Branch.name, BusinessUser.name)
            .join(Customer, Customer.id == Activity.user_id)
            .outerjoin(Branch, Branch.id == Activity.branch_id)
            .outerjoin(BusinessUser, BusinessUser.id == Activity.staff_id),
            actor,
        )

        if transaction_type == TransactionType.STAMP:
            query = query.filter(Activity.type == ActivityType.EARN)
        elif transaction_type == TransactionType.REDEEM:
            query = query.filter(Activity.type == ActivityType.REDEEM)

        start = range_start(date_range, now)
        if start is not None:
            query = query.filter(Activity.created_at >= start)

        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(Customer.name).like(pattern),
                    func.lower(Customer.email).like(pattern),
                )
            )

        rows = (
            query.order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(settings.transactions_page_limit)
            .all()
        )

        return [
            TransactionOut(
                id=activity.id,
                type=transaction_label(activity.type),
                customer_name=customer.name or customer.email or "Unknown",
                customer_email=customer.email or "",
                branch_name=branch_name or "Unknown",
                timestamp=activity.created_at,
                staff_name=scanned_by,
            )
            for activity, customer, branch_name, scanned_by in rows
        ]

    def statistics(
        self, actor: BusinessUser, now: datetime, date_range: DateRange = DateRange.WEEK
    ) -> StatisticsOut:
        """Chart data for today, the last 7 days (default) or the last 30 days"""
        self._authorize(actor, StaffAction.VIEW_DASHBOARD)

        if date_range not in (DateRange.TODAY, DateRange.MONTH):
            date_range = DateRange.WEEK
        start = range_start(date_range, now)

        summary = self._period(actor, start)
        avg_stamps = round(summary.stamps / summary.customers, 2) if summary.customers else 0.0
        conversion = round(summary.redeems / summary.stamps * 100, 1) if summary.stamps else 0.0

        hour = func.extract("hour", Activity.created_at)
        hourly_rows = (
            self._scope(self.db.query(hour.label("hour"), func.count(Activity.id)), actor)
            .filter(
                and_(
                    Activity.created_at >= start,
                    hour >= BUSINESS_HOURS.start,
                    hour < BUSINESS_HOURS.stop,
                )
            )
            .group_by(hour)
            .all()
        )
        per_hour = {int(h): count for h, count in hourly_rows}

        return StatisticsOut(
            total_stamps=summary.stamps,
            total_redeems=summary.redeems,
            unique_customers=summary.customers,
            avg_stamps_per_customer=avg_stamps,
            conversion_rate=conversion,
            hourly_activity=[
                HourlyActivity(hour=f"{h}:00", stamps=per_hour.get(h, 0))
                for h in BUSINESS_HOURS
            ],
        )
