import json
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from modules.loyalty.exceptions import (
    InvalidQRFormatError,
    QRExpiredError,
    WrongQRPurposeError,
)
from modules.loyalty.services.qr_payload import (
    StampQRPayload,
    build_redeem_payload,
    build_stamp_payload,
    ensure_fresh,
    parse_redeem_payload,
    parse_stamp_payload,
    to_epoch_ms,
)

NOW = datetime(2024, 5, 6, 12, 0, 0)


class TestParsing:
    def test_stamp_payload_wire_shape(self):
        raw = build_stamp_payload("user-1", "ayse@stampcard.io", NOW)

        assert json.loads(raw) == {
            "type": "user",
            "userId": "user-1",
            "email": "ayse@stampcard.io",
            "timestamp": to_epoch_ms(NOW),
        }

    def test_redeem_payload_wire_shape(self):
        raw = build_redeem_payload("user-1", "brand-1", NOW)

        payload = parse_redeem_payload(raw)
        assert (payload.user_id, payload.brand_id) == ("user-1", "brand-1")
        assert json.loads(raw)["type"] == "redeem"

    def test_epoch_ms_is_utc(self):
        assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", "42", ""])
    def test_malformed_text(self, raw):
        with pytest.raises(InvalidQRFormatError):
            parse_stamp_payload(raw)

    def test_missing_user_id(self):
        raw = json.dumps({"type": "user", "timestamp": to_epoch_ms(NOW)})
        with pytest.raises(InvalidQRFormatError):
            parse_stamp_payload(raw)

    def test_non_numeric_timestamp(self):
        raw = json.dumps({"type": "user", "userId": "u", "timestamp": "yesterday"})
        with pytest.raises(InvalidQRFormatError):
            parse_stamp_payload(raw)

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_timestamp(self, constant):
        stamp_raw = '{"type": "user", "userId": "u", "timestamp": ' + constant + "}"
        redeem_raw = (
            '{"type": "redeem", "userId": "u", "brandId": "b", "timestamp": ' + constant + "}"
        )

        with pytest.raises(InvalidQRFormatError):
            parse_stamp_payload(stamp_raw)
        with pytest.raises(InvalidQRFormatError):
            parse_redeem_payload(redeem_raw)

    def test_model_rejects_non_finite_timestamp(self):
        with pytest.raises(PydanticValidationError):
            StampQRPayload.model_validate({"userId": "u", "timestamp": float("inf")})

    def test_redeem_code_on_stamp_endpoint(self):
        raw = build_redeem_payload("user-1", "brand-1", NOW)

        with pytest.raises(WrongQRPurposeError) as exc_info:
            parse_stamp_payload(raw)
        assert exc_info.value.details == {"expected": "user", "actual": "redeem"}

    def test_stamp_code_on_redeem_endpoint(self):
        raw = build_stamp_payload("user-1", None, NOW)
        with pytest.raises(WrongQRPurposeError):
            parse_redeem_payload(raw)

    def test_redeem_payload_needs_brand(self):
        raw = json.dumps({"type": "redeem", "userId": "u", "timestamp": to_epoch_ms(NOW)})
        with pytest.raises(InvalidQRFormatError):
            parse_redeem_payload(raw)


class TestFreshness:
    def test_exactly_at_limit_is_accepted(self):
        ensure_fresh(to_epoch_ms(NOW - timedelta(seconds=300)), NOW, 300)

    def test_one_millisecond_past_limit(self):
        stale = to_epoch_ms(NOW - timedelta(seconds=300)) - 1
        with pytest.raises(QRExpiredError) as exc_info:
            ensure_fresh(stale, NOW, 300)
        assert exc_info.value.details["maxAgeSeconds"] == 300

    def test_future_timestamp_is_accepted(self):
        ensure_fresh(to_epoch_ms(NOW + timedelta(minutes=2)), NOW, 300)
