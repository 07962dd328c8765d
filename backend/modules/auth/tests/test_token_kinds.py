from datetime import timedelta

import pytest

from core.auth import (
    PrincipalKind,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)
from core.exceptions import InvalidOrExpiredTokenError
from tests.factories import BusinessUserFactory, CustomerFactory


class TestTokenCodec:
    def test_round_trip_claims(self):
        token = create_access_token("abc", PrincipalKind.BUSINESS)
        data = verify_token(token)

        assert data.principal_id == "abc"
        assert data.kind == PrincipalKind.BUSINESS
        assert data.token_id

    def test_expired_token_rejected(self):
        token = create_access_token("abc", PrincipalKind.CUSTOMER, timedelta(seconds=-5))
        with pytest.raises(InvalidOrExpiredTokenError):
            verify_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token("abc", PrincipalKind.CUSTOMER)
        with pytest.raises(InvalidOrExpiredTokenError):
            verify_token(token[:-4] + "AAAA")

    def test_password_hashing(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)
        assert not verify_password("hunter22", None)


class TestTokenKindSeparation:
    """Customer and business tokens are not interchangeable"""

    def test_missing_token(self, client, db_session):
        assert client.get("/api/memberships").status_code == 401
        assert client.get("/api/business/dashboard").status_code == 401

    def test_garbage_token(self, client, db_session):
        headers = {"Authorization": "Bearer not-a-jwt"}
        response = client.get("/api/memberships", headers=headers)

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_OR_EXPIRED_TOKEN"

    def test_customer_token_on_business_endpoint(self, client, db_session, customer_headers):
        customer = CustomerFactory()

        response = client.get("/api/business/dashboard", headers=customer_headers(customer))
        assert response.status_code == 401

    def test_business_token_on_customer_endpoint(self, client, db_session, business_headers):
        staff = BusinessUserFactory()

        response = client.get("/api/memberships", headers=business_headers(staff))
        assert response.status_code == 401

    def test_customer_kind_with_business_id(self, client, db_session):
        # Ids are looked up in the table matching the token kind
        staff = BusinessUserFactory()
        token = create_access_token(staff.id, PrincipalKind.CUSTOMER)

        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404

    def test_deleted_customer(self, client, db_session, customer_headers):
        customer = CustomerFactory()
        headers = customer_headers(customer)
        db_session.delete(customer)
        db_session.commit()

        response = client.get("/api/users/me", headers=headers)

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"
