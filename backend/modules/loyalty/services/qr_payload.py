"""
QR payload codec.

The customer app renders a JSON document as a QR code; the business
scanner submits the decoded text back. Two shapes exist:

    earn:   {"type": "user", "userId": ..., "email": ..., "timestamp": <epoch-ms>}
    redeem: {"type": "redeem", "userId": ..., "brandId": ..., "timestamp": <epoch-ms>}
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import Field, ValidationError as PydanticValidationError

from core.schemas import APIModel
from ..exceptions import InvalidQRFormatError, WrongQRPurposeError, QRExpiredError

EARN_QR_TYPE = "user"
REDEEM_QR_TYPE = "redeem"


class StampQRPayload(APIModel):
    type: str = EARN_QR_TYPE
    user_id: str = Field(..., min_length=1)
    email: Optional[str] = None
    timestamp: float = Field(..., allow_inf_nan=False)


class RedeemQRPayload(APIModel):
    type: str = REDEEM_QR_TYPE
    user_id: str = Field(..., min_length=1)
    brand_id: str = Field(..., min_length=1)
    timestamp: float = Field(..., allow_inf_nan=False)


def to_epoch_ms(moment: datetime) -> int:
    """Epoch milliseconds of a naive UTC datetime"""
    return int(moment.replace(tzinfo=timezone.utc).timestamp() * 1000)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise InvalidQRFormatError()


def _decode(qr_data: str, expected_type: str) -> dict:
    try:
        data = json.loads(qr_data, parse_constant=_reject_constant)
    except (TypeError, ValueError):
        raise InvalidQRFormatError()

    if not isinstance(data, dict):
        raise InvalidQRFormatError()

    if data.get("type") != expected_type:
        raise WrongQRPurposeError(expected_type, data.get("type"))
    return data


def parse_stamp_payload(qr_data: str) -> StampQRPayload:
    data = _decode(qr_data, EARN_QR_TYPE)
    try:
        return StampQRPayload.model_validate(data)
    except PydanticValidationError:
        raise InvalidQRFormatError("Invalid QR code")


def parse_redeem_payload(qr_data: str) -> RedeemQRPayload:
    data = _decode(qr_data, REDEEM_QR_TYPE)
    try:
        return RedeemQRPayload.model_validate(data)
    except PydanticValidationError:
        raise InvalidQRFormatError("Invalid QR code")


def ensure_fresh(timestamp_ms: float, now: datetime, max_age_seconds: int) -> None:
    """
    Reject payloads older than the freshness window.

    A payload exactly ``max_age_seconds`` old is still accepted. Timestamps
    ahead of the server clock are accepted as well.
    """
    age_ms = to_epoch_ms(now) - timestamp_ms
    if age_ms > max_age_seconds * 1000:
        raise QRExpiredError(int(age_ms // 1000), max_age_seconds)


def build_stamp_payload(user_id: str, email: Optional[str], now: datetime) -> str:
    payload = StampQRPayload(user_id=user_id, email=email, timestamp=to_epoch_ms(now))
    return _encode(payload)


def build_redeem_payload(user_id: str, brand_id: str, now: datetime) -> str:
    payload = RedeemQRPayload(user_id=user_id, brand_id=brand_id, timestamp=to_epoch_ms(now))
    return _encode(payload)


def _encode(payload: APIModel) -> str:
    data = payload.model_dump(by_alias=True, exclude_none=True)
    data["timestamp"] = int(data["timestamp"])
    return json.dumps(data, separators=(",", ":"))


def payload_expiry(now: datetime, max_age_seconds: int) -> datetime:
    return now + timedelta(seconds=max_age_seconds)
