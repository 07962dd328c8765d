import pytest

from core.auth import verify_password
from modules.auth.models import BusinessRole, BusinessUser
from tests.factories import BrandFactory, BranchFactory, BusinessUserFactory


@pytest.fixture
def brand(db_session):
    return BrandFactory()


@pytest.fixture
def branch(brand):
    return BranchFactory(brand=brand, name="Kadikoy")


@pytest.fixture
def other_branch(brand):
    return BranchFactory(brand=brand, name="Besiktas")


@pytest.fixture
def owner(brand):
    return BusinessUserFactory(owner=True, brand=brand)


@pytest.fixture
def manager(brand, branch, owner):
    return BusinessUserFactory(manager=True, brand=brand, branch=branch, created_by=owner.id)


def new_staff(**overrides):
    payload = {
        "email": "new.barista@stampcard.io",
        "name": "New Barista",
        "password": "secret123",
        "role": "STAFF",
    }
    payload.update(overrides)
    return payload


class TestCreateStaff:
    def test_owner_creates_staff_at_branch(self, client, db_session, owner, branch, business_headers):
        response = client.post(
            "/api/business/staff",
            json=new_staff(branchId=branch.id),
            headers=business_headers(owner),
        )

        assert response.status_code == 201
        staff = response.json()["staff"]
        assert staff["role"] == "STAFF"
        assert staff["branch"]["id"] == branch.id
        assert staff["createdBy"] == owner.id
        assert "passwordHash" not in staff

        stored = db_session.get(BusinessUser, staff["id"])
        assert verify_password("secret123", stored.password_hash)

    def test_owner_creates_second_owner_without_branch(self, client, owner, branch, business_headers):
        response = client.post(
            "/api/business/staff",
            json=new_staff(role="OWNER", branchId=branch.id),
            headers=business_headers(owner),
        )

        assert response.status_code == 201
        assert response.json()["staff"]["branch"] is None

    def test_non_owner_requires_branch(self, client, owner, business_headers):
        response = client.post(
            "/api/business/staff", json=new_staff(), headers=business_headers(owner)
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STAFF_ASSIGNMENT"

    def test_manager_creates_staff_at_own_branch(self, client, manager, branch, business_headers):
        response = client.post(
            "/api/business/staff",
            json=new_staff(branchId=branch.id),
            headers=business_headers(manager),
        )

        assert response.status_code == 201
        assert response.json()["staff"]["createdBy"] == manager.id

    def test_manager_branch_defaults_to_own(self, client, manager, branch, business_headers):
        response = client.post(
            "/api/business/staff", json=new_staff(), headers=business_headers(manager)
        )

        assert response.status_code == 201
        assert response.json()["staff"]["branch"]["id"] == branch.id

    @pytest.mark.parametrize("role", ["OWNER", "BRANCH_MANAGER"])
    def test_manager_cannot_create_elevated_roles(self, client, manager, role, business_headers):
        response = client.post(
            "/api/business/staff",
            json=new_staff(role=role),
            headers=business_headers(manager),
        )
        assert response.status_code == 403

    def test_manager_cannot_staff_other_branch(self, client, manager, other_branch, business_headers):
        response = client.post(
            "/api/business/staff",
            json=new_staff(branchId=other_branch.id),
            headers=business_headers(manager),
        )
        assert response.status_code == 403

    def test_staff_cannot_create_staff(self, client, brand, branch, business_headers):
        staff = BusinessUserFactory(brand=brand, branch=branch)

        response = client.post(
            "/api/business/staff",
            json=new_staff(branchId=branch.id),
            headers=business_headers(staff),
        )
        assert response.status_code == 403

    def test_branch_of_other_brand(self, client, owner, business_headers):
        foreign = BranchFactory(brand=BrandFactory())

        response = client.post(
            "/api/business/staff",
            json=new_staff(branchId=foreign.id),
            headers=business_headers(owner),
        )
        assert response.status_code == 403

    def test_duplicate_email(self, client, owner, branch, business_headers):
        BusinessUserFactory(email="taken@stampcard.io", brand=owner.brand, branch=branch)

        response = client.post(
            "/api/business/staff",
            json=new_staff(email="Taken@StampCard.io", branchId=branch.id),
            headers=business_headers(owner),
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "DUPLICATE_EMAIL"


class TestListStaff:
    def test_owner_sees_whole_brand(self, client, owner, manager, branch, other_branch, business_headers):
        BusinessUserFactory(brand=owner.brand, branch=other_branch)
        BusinessUserFactory(brand=BrandFactory())

        response = client.get("/api/business/staff", headers=business_headers(owner))

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_manager_sees_only_own_hires(self, client, owner, manager, branch, business_headers):
        hired = BusinessUserFactory(brand=owner.brand, branch=branch, created_by=manager.id)
        BusinessUserFactory(brand=owner.brand, branch=branch, created_by=owner.id)

        response = client.get("/api/business/staff", headers=business_headers(manager))

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [hired.id]

    def test_staff_cannot_list(self, client, brand, branch, business_headers):
        staff = BusinessUserFactory(brand=brand, branch=branch)

        response = client.get("/api/business/staff", headers=business_headers(staff))
        assert response.status_code == 403


class TestManageStaff:
    @pytest.fixture
    def hired(self, manager, branch):
        return BusinessUserFactory(brand=manager.brand, branch=branch, created_by=manager.id)

    @pytest.fixture
    def owner_hire(self, owner, branch):
        return BusinessUserFactory(brand=owner.brand, branch=branch, created_by=owner.id)

    def test_manager_renames_own_hire(self, client, manager, hired, business_headers):
        response = client.put(
            f"/api/business/staff/{hired.id}",
            json={"name": "Renamed Barista"},
            headers=business_headers(manager),
        )

        assert response.status_code == 200
        assert response.json()["staff"]["name"] == "Renamed Barista"

    def test_manager_cannot_edit_other_hires(self, client, manager, owner_hire, business_headers):
        response = client.put(
            f"/api/business/staff/{owner_hire.id}",
            json={"name": "Renamed"},
            headers=business_headers(manager),
        )
        assert response.status_code == 403

    def test_manager_cannot_promote(self, client, manager, hired, business_headers):
        response = client.put(
            f"/api/business/staff/{hired.id}",
            json={"role": "BRANCH_MANAGER"},
            headers=business_headers(manager),
        )
        assert response.status_code == 403

    def test_owner_promotes_to_owner_clears_branch(self, client, db_session, owner, owner_hire, business_headers):
        response = client.put(
            f"/api/business/staff/{owner_hire.id}",
            json={"role": "OWNER"},
            headers=business_headers(owner),
        )

        assert response.status_code == 200
        db_session.expire_all()
        stored = db_session.get(BusinessUser, owner_hire.id)
        assert stored.role == BusinessRole.OWNER
        assert stored.branch_id is None

    def test_owner_cannot_demote_self(self, client, owner, business_headers):
        response = client.put(
            f"/api/business/staff/{owner.id}",
            json={"role": "STAFF"},
            headers=business_headers(owner),
        )
        assert response.status_code == 403

    def test_deactivate_and_reactivate(self, client, db_session, owner, owner_hire, business_headers):
        headers = business_headers(owner)

        deactivated = client.delete(f"/api/business/staff/{owner_hire.id}", headers=headers)
        assert deactivated.status_code == 200
        db_session.expire_all()
        assert db_session.get(BusinessUser, owner_hire.id).is_active is False

        activated = client.post(f"/api/business/staff/{owner_hire.id}/activate", headers=headers)
        assert activated.status_code == 200
        db_session.expire_all()
        assert db_session.get(BusinessUser, owner_hire.id).is_active is True

    def test_manager_cannot_reactivate(self, client, db_session, manager, hired, business_headers):
        hired.is_active = False
        db_session.commit()

        response = client.post(
            f"/api/business/staff/{hired.id}/activate", headers=business_headers(manager)
        )
        assert response.status_code == 403
        assert response.json()["details"] == {"requiredRoles": ["OWNER"]}
        assert db_session.get(BusinessUser, hired.id).is_active is False

    def test_cannot_deactivate_self(self, client, owner, business_headers):
        response = client.delete(f"/api/business/staff/{owner.id}", headers=business_headers(owner))
        assert response.status_code == 403

    def test_deactivated_staff_cannot_use_token(self, client, owner, owner_hire, business_headers):
        staff_headers = business_headers(owner_hire)
        client.delete(f"/api/business/staff/{owner_hire.id}", headers=business_headers(owner))

        response = client.get("/api/business/dashboard", headers=staff_headers)
        assert response.status_code == 403

    def test_manager_resets_password_of_own_hire(self, client, db_session, manager, hired, business_headers):
        response = client.post(
            f"/api/business/staff/{hired.id}/reset-password",
            json={"newPassword": "brand-new-pass"},
            headers=business_headers(manager),
        )

        assert response.status_code == 200
        db_session.expire_all()
        assert verify_password("brand-new-pass", db_session.get(BusinessUser, hired.id).password_hash)

    def test_unknown_staff(self, client, owner, business_headers):
        response = client.put(
            "/api/business/staff/missing",
            json={"name": "Ghost"},
            headers=business_headers(owner),
        )
        assert response.status_code == 404
