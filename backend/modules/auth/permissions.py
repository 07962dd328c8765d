# backend/modules/auth/permissions.py

"""
Role policy for business actors.

``evaluate`` is a pure function of (actor, action, target): it reads only
the attributes of the objects it is given and never touches the database.
Cross-brand targets are denied for every role before any role rule runs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

from core.exceptions import ForbiddenError
from modules.auth.models import BusinessRole, BusinessUser
from modules.brands.models import Brand, Branch


class StaffAction(str, Enum):
    """Business-facing operations subject to the role policy"""

    # Branch directory
    VIEW_BRANCHES = "branches:view"
    CREATE_BRANCH = "branches:create"
    UPDATE_BRANCH = "branches:update"
    DELETE_BRANCH = "branches:delete"
    VIEW_BRANCH_STATS = "branches:stats"

    # Staff directory
    VIEW_STAFF = "staff:view"
    CREATE_STAFF = "staff:create"
    UPDATE_STAFF = "staff:update"
    DEACTIVATE_STAFF = "staff:deactivate"
    ACTIVATE_STAFF = "staff:activate"
    RESET_STAFF_PASSWORD = "staff:reset_password"

    # Counter operations and reporting
    SCAN = "loyalty:scan"
    VIEW_DASHBOARD = "reports:dashboard"
    VIEW_CUSTOMERS = "reports:customers"

    # Settings
    VIEW_SETTINGS = "settings:view"
    UPDATE_BRAND_SETTINGS = "settings:brand"
    UPDATE_LOYALTY_CONFIG = "settings:loyalty"


@dataclass(frozen=True)
class StaffChange:
    """A proposed staff create or update.

    ``existing`` is the stored staff row for updates and ``None`` for
    creates. Fields left as ``None`` are not being changed.
    """

    brand_id: str
    role: Optional[BusinessRole] = None
    branch_id: Optional[str] = None
    is_active: Optional[bool] = None
    existing: Optional[BusinessUser] = None


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


Target = Union[Brand, Branch, BusinessUser, StaffChange]

ALLOW = PolicyDecision(True)


def deny(reason: str) -> PolicyDecision:
    return PolicyDecision(False, reason)


def target_brand_id(target: Target) -> str:
    if isinstance(target, Brand):
        return target.id
    return target.brand_id


def _target_staff(target: Target) -> Optional[BusinessUser]:
    if isinstance(target, BusinessUser):
        return target
    if isinstance(target, StaffChange):
        return target.existing
    return None


def _owner_rules(actor: BusinessUser, action: StaffAction, target: Target) -> PolicyDecision:
    staff = _target_staff(target)
    is_self = staff is not None and staff.id == actor.id

    if action == StaffAction.UPDATE_STAFF and is_self:
        if target.role is not None and target.role != BusinessRole.OWNER:
            return deny("You cannot change your own role")
        if target.is_active is False:
            return deny("You cannot deactivate your own account")
    return ALLOW


def _branch_manager_rules(
    actor: BusinessUser, action: StaffAction, target: Target
) -> PolicyDecision:
    if action in (
        StaffAction.VIEW_BRANCHES,
        StaffAction.VIEW_STAFF,
        StaffAction.SCAN,
        StaffAction.VIEW_DASHBOARD,
        StaffAction.VIEW_CUSTOMERS,
        StaffAction.VIEW_SETTINGS,
    ):
        return ALLOW

    if action in (StaffAction.UPDATE_BRANCH, StaffAction.VIEW_BRANCH_STATS):
        if isinstance(target, Branch) and target.id == actor.branch_id:
            return ALLOW
        return deny("You can only manage your own branch")

    if action == StaffAction.CREATE_STAFF:
        if target.role != BusinessRole.STAFF:
            return deny("Branch managers can only create staff with the STAFF role")
        if target.branch_id != actor.branch_id:
            return deny("Branch managers can only add staff to their own branch")
        return ALLOW

    if action in (
        StaffAction.UPDATE_STAFF,
        StaffAction.DEACTIVATE_STAFF,
        StaffAction.RESET_STAFF_PASSWORD,
    ):
        staff = _target_staff(target)
        if staff is None or staff.created_by != actor.id:
            return deny("You can only manage staff you created")
        if isinstance(target, StaffChange):
            if target.role is not None and target.role != BusinessRole.STAFF:
                return deny("Branch managers cannot change a staff member's role")
            if target.branch_id is not None and target.branch_id != actor.branch_id:
                return deny("Branch managers cannot move staff to another branch")
        return ALLOW

    return deny("Insufficient permissions")


def _staff_rules(actor: BusinessUser, action: StaffAction, target: Target) -> PolicyDecision:
    if action in (
        StaffAction.SCAN,
        StaffAction.VIEW_DASHBOARD,
        StaffAction.VIEW_CUSTOMERS,
        StaffAction.VIEW_SETTINGS,
    ):
        return ALLOW
    return deny("Insufficient permissions")


ROLE_RULES: Dict[BusinessRole, Callable[[BusinessUser, StaffAction, Target], PolicyDecision]] = {
    BusinessRole.OWNER: _owner_rules,
    BusinessRole.BRANCH_MANAGER: _branch_manager_rules,
    BusinessRole.STAFF: _staff_rules,
}

assert set(ROLE_RULES) == set(BusinessRole), "every business role needs a policy rule"


def evaluate(actor: BusinessUser, action: StaffAction, target: Target) -> PolicyDecision:
    """Decide whether ``actor`` may perform ``action`` on ``target``."""
    if not actor.is_active:
        return deny("Account is disabled")

    if target_brand_id(target) != actor.brand_id:
        return deny("Access to another brand is not allowed")

    if action == StaffAction.DEACTIVATE_STAFF:
        staff = _target_staff(target)
        if staff is not None and staff.id == actor.id:
            return deny("You cannot deactivate your own account")

    return ROLE_RULES[BusinessRole(actor.role)](actor, action, target)


def can_act(actor: BusinessUser, action: StaffAction, target: Target) -> bool:
    return evaluate(actor, action, target).allowed


def authorize(actor: BusinessUser, action: StaffAction, target: Target) -> None:
    """
    Enforce the policy.

    Raises:
        ForbiddenError: with the denial reason when the action is not allowed
    """
    decision = evaluate(actor, action, target)
    if not decision.allowed:
        raise ForbiddenError(decision.reason, {"action": action.value})
