import json
from datetime import timedelta

import pytest

from modules.loyalty.models import Activity, ActivityType, Membership
from modules.loyalty.services.qr_payload import to_epoch_ms
from tests.factories import BrandFactory, BranchFactory, CustomerFactory


@pytest.fixture
def customer(db_session):
    return CustomerFactory(email="ayse@stampcard.io")


@pytest.fixture
def wallet(db_session, customer, clock):
    """Two memberships with a short history each"""
    coffee = BrandFactory(name="Coffee Co", stamps_required=8)
    tea = BrandFactory(name="Tea House", stamps_required=5, reward_name="Free tea")
    coffee_branch = BranchFactory(brand=coffee)
    tea_branch = BranchFactory(brand=tea)

    db_session.add_all(
        [
            Membership(user_id=customer.id, brand_id=coffee.id, stamps=2, joined_at=clock() - timedelta(days=2)),
            Membership(user_id=customer.id, brand_id=tea.id, stamps=0, joined_at=clock() - timedelta(days=1)),
        ]
    )
    for offset, branch, activity_type, delta in (
        (3, coffee_branch, ActivityType.EARN, 1),
        (2, coffee_branch, ActivityType.EARN, 1),
        (1, tea_branch, ActivityType.EARN, 1),
    ):
        db_session.add(
            Activity(
                user_id=customer.id,
                brand_id=branch.brand_id,
                branch_id=branch.id,
                type=activity_type,
                delta=delta,
                created_at=clock() - timedelta(hours=offset),
            )
        )
    db_session.add(
        Activity(
            user_id=customer.id,
            brand_id=tea.id,
            branch_id=tea_branch.id,
            type=ActivityType.REDEEM,
            delta=-1,
            created_at=clock(),
        )
    )
    db_session.commit()
    return {"coffee": coffee, "tea": tea}


class TestMemberships:
    def test_list_newest_first(self, client, customer, wallet, customer_headers):
        response = client.get("/api/memberships", headers=customer_headers(customer))

        assert response.status_code == 200
        body = response.json()
        assert [m["brand"]["name"] for m in body] == ["Tea House", "Coffee Co"]
        assert body[1]["stamps"] == 2
        assert body[1]["brand"]["stampsRequired"] == 8

    def test_get_single_membership(self, client, customer, wallet, customer_headers):
        response = client.get(
            f"/api/memberships/{wallet['coffee'].id}", headers=customer_headers(customer)
        )

        assert response.status_code == 200
        assert response.json()["brandId"] == wallet["coffee"].id

    def test_no_membership(self, client, customer, customer_headers):
        brand = BrandFactory()

        response = client.get(f"/api/memberships/{brand.id}", headers=customer_headers(customer))
        assert response.status_code == 404

    def test_other_customers_are_invisible(self, client, wallet, customer_headers):
        stranger = CustomerFactory()

        response = client.get("/api/memberships", headers=customer_headers(stranger))
        assert response.json() == []


class TestActivities:
    def test_history_filters(self, client, customer, wallet, customer_headers):
        headers = customer_headers(customer)

        everything = client.get("/api/activities", headers=headers).json()
        earns = client.get("/api/activities", params={"type": "earn"}, headers=headers).json()
        coffee = client.get(
            "/api/activities", params={"brandId": wallet["coffee"].id}, headers=headers
        ).json()
        limited = client.get("/api/activities", params={"limit": 1}, headers=headers).json()

        assert len(everything) == 4
        assert everything[0]["type"] == "redeem"
        assert len(earns) == 3
        assert len(coffee) == 2
        assert [a["id"] for a in limited] == [everything[0]["id"]]

    def test_limit_bounds(self, client, customer, customer_headers):
        response = client.get(
            "/api/activities", params={"limit": 0}, headers=customer_headers(customer)
        )
        assert response.status_code == 400

    def test_stats(self, client, customer, wallet, customer_headers):
        response = client.get("/api/activities/stats", headers=customer_headers(customer))

        assert response.json() == {
            "totalStampsEarned": 3,
            "totalStampsRedeemed": 1,
            "totalActivities": 4,
        }


class TestQRCodes:
    def test_stamp_qr(self, client, customer, clock, customer_headers):
        response = client.get("/api/qr/stamp", headers=customer_headers(customer))

        assert response.status_code == 200
        body = response.json()
        assert json.loads(body["qrData"]) == {
            "type": "user",
            "userId": customer.id,
            "email": "ayse@stampcard.io",
            "timestamp": to_epoch_ms(clock()),
        }
        assert body["expiresAt"].startswith("2024-05-06T12:05:00")

    def test_redeem_qr(self, client, customer, wallet, clock, customer_headers):
        brand_id = wallet["coffee"].id

        response = client.get(f"/api/qr/redeem/{brand_id}", headers=customer_headers(customer))

        assert response.status_code == 200
        payload = json.loads(response.json()["qrData"])
        assert payload["type"] == "redeem"
        assert payload["brandId"] == brand_id
        assert payload["userId"] == customer.id

    def test_redeem_qr_requires_membership(self, client, customer, customer_headers):
        brand = BrandFactory()

        response = client.get(f"/api/qr/redeem/{brand.id}", headers=customer_headers(customer))
        assert response.status_code == 404

    def test_redeem_qr_unknown_brand(self, client, customer, customer_headers):
        response = client.get("/api/qr/redeem/missing", headers=customer_headers(customer))

        assert response.status_code == 404
        assert response.json()["error"] == "Cafe not found"

    def test_qr_needs_customer_token(self, client, db_session):
        assert client.get("/api/qr/stamp").status_code == 401
