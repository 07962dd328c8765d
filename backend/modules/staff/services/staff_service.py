"""
Staff directory for brand owners and branch managers.

Deleting a staff member only deactivates the account, so ``created_by``
references and the ledger's ``staff_id`` keep pointing at a real row.
"""

from typing import List, Optional
import logging

from sqlalchemy.orm import Session, joinedload

from core.auth import hash_password
from core.exceptions import DuplicateEmailError, ForbiddenError
from modules.auth.models import BusinessRole, BusinessUser
from modules.auth.permissions import StaffAction, StaffChange, authorize
from modules.brands.services.directory_service import DirectoryService
from ..exceptions import StaffNotFoundError, InvalidStaffAssignmentError
from ..schemas.staff_schemas import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


class StaffService:
    def __init__(self, db: Session):
        self.db = db
        self.directory = DirectoryService(db)

    def get_staff(self, staff_id: str) -> BusinessUser:
        staff = (
            self.db.query(BusinessUser)
            .options(joinedload(BusinessUser.brand), joinedload(BusinessUser.branch))
            .filter(BusinessUser.id == staff_id)
            .first()
        )
        if staff is None:
            raise StaffNotFoundError(staff_id)
        return staff

    def _ensure_email_free(self, email: str, exclude_id: Optional[str] = None) -> None:
        query = self.db.query(BusinessUser.id).filter(BusinessUser.email == email)
        if exclude_id is not None:
            query = query.filter(BusinessUser.id != exclude_id)
        if query.first() is not None:
            raise DuplicateEmailError(email)

    def _ensure_branch_in_brand(self, actor: BusinessUser, branch_id: str) -> None:
        branch = self.directory.get_branch(branch_id)
        if branch.brand_id != actor.brand_id:
            raise ForbiddenError(
                "Access to another brand is not allowed", {"branchId": branch_id}
            )

    def list_staff(self, actor: BusinessUser) -> List[BusinessUser]:
        """
        Owners see every staff account of the brand. Branch managers see
        only the accounts they created at their own branch.
        """
        authorize(actor, StaffAction.VIEW_STAFF, self.directory.get_brand(actor.brand_id))

        query = (
            self.db.query(BusinessUser)
            .options(joinedload(BusinessUser.brand), joinedload(BusinessUser.branch))
            .filter(BusinessUser.brand_id == actor.brand_id)
        )
        if actor.role == BusinessRole.BRANCH_MANAGER:
            query = query.filter(
                BusinessUser.branch_id == actor.branch_id,
                BusinessUser.created_by == actor.id,
            )
        return query.order_by(BusinessUser.created_at.desc(), BusinessUser.id.desc()).all()

    def create_staff(self, actor: BusinessUser, data: StaffCreate) -> BusinessUser:
        role = data.role
        if role == BusinessRole.OWNER:
            branch_id = None
        else:
            branch_id = data.branch_id or actor.branch_id

        authorize(
            actor,
            StaffAction.CREATE_STAFF,
            StaffChange(brand_id=actor.brand_id, role=role, branch_id=branch_id, is_active=True),
        )

        if role != BusinessRole.OWNER:
            if branch_id is None:
                raise InvalidStaffAssignmentError("branchId is required for non-owner staff")
            self._ensure_branch_in_brand(actor, branch_id)

        email = data.email.lower()
        self._ensure_email_free(email)

        staff = BusinessUser(
            email=email,
            name=data.name,
            password_hash=hash_password(data.password),
            role=role,
            brand_id=actor.brand_id,
            branch_id=branch_id,
            created_by=actor.id,
            is_active=True,
        )
        self.db.add(staff)
        self.db.commit()

        logger.info(
            f"Staff {staff.id} ({role.value}) created in brand {actor.brand_id} by {actor.id}"
        )
        return self.get_staff(staff.id)

    def update_staff(self, actor: BusinessUser, staff_id: str, data: StaffUpdate) -> BusinessUser:
        staff = self.get_staff(staff_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        authorize(
            actor,
            StaffAction.UPDATE_STAFF,
            StaffChange(
                brand_id=staff.brand_id,
                role=changes.get("role"),
                branch_id=changes.get("branch_id"),
                is_active=changes.get("is_active"),
                existing=staff,
            ),
        )

        new_role = changes.get("role", staff.role)
        if new_role == BusinessRole.OWNER:
            new_branch_id = None
        else:
            new_branch_id = changes.get("branch_id", staff.branch_id)
            if new_branch_id is None:
                raise InvalidStaffAssignmentError("branchId is required for non-owner staff")
            if new_branch_id != staff.branch_id:
                self._ensure_branch_in_brand(actor, new_branch_id)

        if "email" in changes:
            email = changes["email"].lower()
            self._ensure_email_free(email, exclude_id=staff.id)
            staff.email = email
        if "name" in changes:
            staff.name = changes["name"]
        if "password" in changes:
            staff.password_hash = hash_password(changes["password"])
        if "is_active" in changes:
            staff.is_active = changes["is_active"]
        staff.role = new_role
        staff.branch_id = new_branch_id

        self.db.commit()
        logger.info(f"Staff {staff.id} updated by {actor.id}: fields={sorted(changes)}")
        return self.get_staff(staff.id)

    def deactivate_staff(self, actor: BusinessUser, staff_id: str) -> None:
        staff = self.get_staff(staff_id)
        authorize(actor, StaffAction.DEACTIVATE_STAFF, staff)

        staff.is_active = False
        self.db.commit()
        logger.info(f"Staff {staff.id} deactivated by {actor.id}")

    def activate_staff(self, actor: BusinessUser, staff_id: str) -> None:
        staff = self.get_staff(staff_id)
        authorize(actor, StaffAction.ACTIVATE_STAFF, staff)

        staff.is_active = True
        self.db.commit()
        logger.info(f"Staff {staff.id} activated by {actor.id}")

    def reset_password(self, actor: BusinessUser, staff_id: str, new_password: str) -> None:
        staff = self.get_staff(staff_id)
        authorize(actor, StaffAction.RESET_STAFF_PASSWORD, staff)

        staff.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info(f"Password for staff {staff.id} reset by {actor.id}")
