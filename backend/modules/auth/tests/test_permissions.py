import pytest

from core.exceptions import ForbiddenError
from modules.auth.models import BusinessRole, BusinessUser
from modules.auth.permissions import (
    ROLE_RULES,
    StaffAction,
    StaffChange,
    authorize,
    can_act,
    evaluate,
)
from modules.brands.models import Brand, Branch


def make_user(id, role, brand_id="brand-a", branch_id=None, is_active=True, created_by=None):
    return BusinessUser(
        id=id,
        email=f"{id}@stampcard.io",
        name=id,
        role=role,
        brand_id=brand_id,
        branch_id=branch_id,
        is_active=is_active,
        created_by=created_by,
    )


class TestRolePolicy:
    """Pure policy checks over unsaved model instances"""

    @pytest.fixture
    def brand(self):
        return Brand(id="brand-a", name="Brand A", stamps_required=10, reward_name="Coffee")

    @pytest.fixture
    def other_brand(self):
        return Brand(id="brand-b", name="Brand B", stamps_required=5, reward_name="Tea")

    @pytest.fixture
    def branch(self):
        return Branch(id="branch-1", brand_id="brand-a", name="Kadikoy")

    @pytest.fixture
    def other_branch(self):
        return Branch(id="branch-2", brand_id="brand-a", name="Besiktas")

    @pytest.fixture
    def owner(self):
        return make_user("owner", BusinessRole.OWNER)

    @pytest.fixture
    def manager(self):
        return make_user("manager", BusinessRole.BRANCH_MANAGER, branch_id="branch-1")

    @pytest.fixture
    def staff(self):
        return make_user("staff", BusinessRole.STAFF, branch_id="branch-1")

    def test_every_role_has_rules(self):
        assert set(ROLE_RULES) == set(BusinessRole)

    def test_owner_can_do_everything_in_own_brand(self, owner, brand, branch):
        for action in StaffAction:
            target = branch if action in (
                StaffAction.UPDATE_BRANCH,
                StaffAction.DELETE_BRANCH,
                StaffAction.VIEW_BRANCH_STATS,
            ) else brand
            if action in (
                StaffAction.CREATE_STAFF,
                StaffAction.UPDATE_STAFF,
            ):
                target = StaffChange(brand_id="brand-a", role=BusinessRole.STAFF, branch_id="branch-1")
            if action in (
                StaffAction.DEACTIVATE_STAFF,
                StaffAction.ACTIVATE_STAFF,
                StaffAction.RESET_STAFF_PASSWORD,
            ):
                target = make_user("someone", BusinessRole.STAFF, branch_id="branch-1")
            assert can_act(owner, action, target), action

    def test_cross_brand_is_denied_for_every_role(self, owner, manager, staff, other_brand):
        for actor in (owner, manager, staff):
            decision = evaluate(actor, StaffAction.SCAN, other_brand)
            assert not decision
            assert decision.reason == "Access to another brand is not allowed"

    def test_inactive_actor_is_denied(self, brand):
        disabled = make_user("disabled", BusinessRole.OWNER, is_active=False)
        assert not can_act(disabled, StaffAction.VIEW_SETTINGS, brand)

    def test_staff_only_scans_and_views(self, staff, brand, branch):
        assert can_act(staff, StaffAction.SCAN, brand)
        assert can_act(staff, StaffAction.VIEW_DASHBOARD, brand)
        assert can_act(staff, StaffAction.VIEW_CUSTOMERS, brand)
        assert can_act(staff, StaffAction.VIEW_SETTINGS, brand)
        assert not can_act(staff, StaffAction.VIEW_BRANCHES, brand)
        assert not can_act(staff, StaffAction.VIEW_STAFF, brand)
        assert not can_act(staff, StaffAction.UPDATE_BRANCH, branch)
        assert not can_act(staff, StaffAction.UPDATE_LOYALTY_CONFIG, brand)

    def test_manager_limited_to_own_branch(self, manager, branch, other_branch):
        assert can_act(manager, StaffAction.UPDATE_BRANCH, branch)
        assert can_act(manager, StaffAction.VIEW_BRANCH_STATS, branch)
        assert not can_act(manager, StaffAction.UPDATE_BRANCH, other_branch)
        assert not can_act(manager, StaffAction.VIEW_BRANCH_STATS, other_branch)
        assert not can_act(manager, StaffAction.DELETE_BRANCH, branch)

    def test_manager_cannot_touch_brand_configuration(self, manager, brand):
        assert not can_act(manager, StaffAction.CREATE_BRANCH, brand)
        assert not can_act(manager, StaffAction.UPDATE_BRAND_SETTINGS, brand)
        assert not can_act(manager, StaffAction.UPDATE_LOYALTY_CONFIG, brand)

    def test_manager_creates_only_staff_at_own_branch(self, manager):
        ok = StaffChange(brand_id="brand-a", role=BusinessRole.STAFF, branch_id="branch-1")
        wrong_role = StaffChange(brand_id="brand-a", role=BusinessRole.OWNER)
        peer = StaffChange(
            brand_id="brand-a", role=BusinessRole.BRANCH_MANAGER, branch_id="branch-1"
        )
        wrong_branch = StaffChange(brand_id="brand-a", role=BusinessRole.STAFF, branch_id="branch-2")

        assert can_act(manager, StaffAction.CREATE_STAFF, ok)
        assert not can_act(manager, StaffAction.CREATE_STAFF, wrong_role)
        assert not can_act(manager, StaffAction.CREATE_STAFF, peer)
        assert not can_act(manager, StaffAction.CREATE_STAFF, wrong_branch)

    def test_manager_manages_only_staff_it_created(self, manager):
        own = make_user("own", BusinessRole.STAFF, branch_id="branch-1", created_by="manager")
        foreign = make_user("foreign", BusinessRole.STAFF, branch_id="branch-1", created_by="owner")

        for action in (StaffAction.DEACTIVATE_STAFF, StaffAction.RESET_STAFF_PASSWORD):
            assert can_act(manager, action, own)
            assert not can_act(manager, action, foreign)

        assert not can_act(manager, StaffAction.ACTIVATE_STAFF, own)

    def test_manager_cannot_promote_or_move_staff(self, manager):
        own = make_user("own", BusinessRole.STAFF, branch_id="branch-1", created_by="manager")
        rename = StaffChange(brand_id="brand-a", existing=own)
        promote = StaffChange(brand_id="brand-a", role=BusinessRole.BRANCH_MANAGER, existing=own)
        move = StaffChange(brand_id="brand-a", branch_id="branch-2", existing=own)

        assert can_act(manager, StaffAction.UPDATE_STAFF, rename)
        assert not can_act(manager, StaffAction.UPDATE_STAFF, promote)
        assert not can_act(manager, StaffAction.UPDATE_STAFF, move)

    def test_nobody_deactivates_themselves(self, owner, manager):
        assert not can_act(owner, StaffAction.DEACTIVATE_STAFF, owner)
        assert not can_act(manager, StaffAction.DEACTIVATE_STAFF, manager)

    def test_owner_cannot_demote_or_disable_self(self, owner):
        demote = StaffChange(brand_id="brand-a", role=BusinessRole.STAFF, existing=owner)
        disable = StaffChange(brand_id="brand-a", is_active=False, existing=owner)
        rename = StaffChange(brand_id="brand-a", existing=owner)

        assert not can_act(owner, StaffAction.UPDATE_STAFF, demote)
        assert not can_act(owner, StaffAction.UPDATE_STAFF, disable)
        assert can_act(owner, StaffAction.UPDATE_STAFF, rename)

    def test_authorize_raises_with_reason(self, staff, brand):
        with pytest.raises(ForbiddenError) as exc_info:
            authorize(staff, StaffAction.UPDATE_LOYALTY_CONFIG, brand)

        assert exc_info.value.status_code == 403
        assert exc_info.value.details == {"action": "settings:loyalty"}

    def test_evaluate_does_not_mutate_inputs(self, manager, branch):
        before = (manager.role, manager.branch_id, branch.name)
        evaluate(manager, StaffAction.UPDATE_BRANCH, branch)
        assert (manager.role, manager.branch_id, branch.name) == before
