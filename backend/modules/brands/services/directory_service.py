from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from modules.auth.models import BusinessUser
from modules.auth.permissions import StaffAction, authorize
from modules.loyalty.models import Activity
from ..models.brand_models import Brand, Branch
from ..exceptions import (
    BrandNotFoundError,
    BranchNotFoundError,
    BranchNotEmptyError,
    NoBranchForBrandError,
)
from ..schemas.brand_schemas import BranchCreate, BranchUpdate, BranchStats

logger = logging.getLogger(__name__)


def start_of_day(moment: datetime) -> datetime:
    """UTC midnight of the day containing ``moment``"""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class DirectoryService:
    """Brand to branch hierarchy used by scans, staff management and the
    branch screens of the business dashboard."""

    def __init__(self, db: Session):
        self.db = db

    def get_brand(self, brand_id: str) -> Brand:
        brand = self.db.get(Brand, brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)
        return brand

    def get_branch(self, branch_id: str) -> Branch:
        branch = self.db.get(Branch, branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)
        return branch

    def resolve_scan_branch(self, staff: BusinessUser) -> str:
        """
        Branch a scan is attributed to.

        Staff bound to a branch scan for that branch. Owners have no branch,
        so their scans go to the brand's earliest created branch, with the id
        as tie-break for identical timestamps.
        """
        if staff.branch_id:
            return staff.branch_id

        branch_id = (
            self.db.query(Branch.id)
            .filter(Branch.brand_id == staff.brand_id)
            .order_by(Branch.created_at.asc(), Branch.id.asc())
            .limit(1)
            .scalar()
        )
        if branch_id is None:
            raise NoBranchForBrandError(staff.brand_id)
        return branch_id

    def list_branches(self, actor: BusinessUser) -> List[Branch]:
        authorize(actor, StaffAction.VIEW_BRANCHES, self.get_brand(actor.brand_id))
        return (
            self.db.query(Branch)
            .filter(Branch.brand_id == actor.brand_id)
            .order_by(Branch.created_at.asc(), Branch.id.asc())
            .all()
        )

    def create_branch(self, actor: BusinessUser, data: BranchCreate) -> Branch:
        authorize(actor, StaffAction.CREATE_BRANCH, self.get_brand(actor.brand_id))

        branch = Branch(brand_id=actor.brand_id, **data.model_dump())
        self.db.add(branch)
        self.db.commit()
        self.db.refresh(branch)

        logger.info(f"Branch {branch.id} created for brand {actor.brand_id} by {actor.id}")
        return branch

    def update_branch(self, actor: BusinessUser, branch_id: str, data: BranchUpdate) -> Branch:
        branch = self.get_branch(branch_id)
        authorize(actor, StaffAction.UPDATE_BRANCH, branch)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(branch, field, value)

        self.db.commit()
        self.db.refresh(branch)

        logger.info(f"Branch {branch.id} updated by {actor.id}")
        return branch

    def delete_branch(self, actor: BusinessUser, branch_id: str) -> None:
        """Delete a branch that has never had staff or ledger entries.

        Deactivated staff still reference their branch, as do ledger rows,
        so either blocks the delete.
        """
        branch = self.get_branch(branch_id)
        authorize(actor, StaffAction.DELETE_BRANCH, branch)

        staff_count = (
            self.db.query(func.count(BusinessUser.id))
            .filter(BusinessUser.branch_id == branch.id)
            .scalar()
        )
        activity_count = (
            self.db.query(func.count(Activity.id))
            .filter(Activity.branch_id == branch.id)
            .scalar()
        )
        if staff_count or activity_count:
            raise BranchNotEmptyError(branch.id, staff_count, activity_count)

        self.db.delete(branch)
        self.db.commit()
        logger.info(f"Branch {branch_id} deleted by {actor.id}")

    def branch_stats(self, actor: BusinessUser, branch_id: str, now: datetime) -> BranchStats:
        branch = self.get_branch(branch_id)
        authorize(actor, StaffAction.VIEW_BRANCH_STATS, branch)

        today = start_of_day(now)
        total, unique_customers = (
            self.db.query(func.count(Activity.id), func.count(func.distinct(Activity.user_id)))
            .filter(Activity.branch_id == branch.id)
            .one()
        )
        today_count = (
            self.db.query(func.count(Activity.id))
            .filter(Activity.branch_id == branch.id, Activity.created_at >= today)
            .scalar()
        )

        return BranchStats(
            branch_id=branch.id,
            branch_name=branch.name,
            total_activities=total,
            today_activities=today_count,
            unique_customers=unique_customers,
        )

    def find_branch(self, branch_id: Optional[str]) -> Optional[Branch]:
        if branch_id is None:
            return None
        return self.get_branch(branch_id)
