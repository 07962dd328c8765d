"""Exceptions raised by QR scanning and the loyalty ledger"""

from core.exceptions import (
    APIError,
    NotFoundError,
    ValidationError,
    ForbiddenError,
    TooManyRequestsError,
)


class InvalidQRFormatError(ValidationError):
    """Payload is not JSON or lacks required fields"""

    error_code = "INVALID_QR_FORMAT"

    def __init__(self, reason: str = "Invalid QR code format"):
        super().__init__(reason)


class WrongQRPurposeError(ValidationError):
    """Payload type does not match the endpoint it was submitted to"""

    error_code = "WRONG_QR_PURPOSE"

    def __init__(self, expected: str, actual):
        super().__init__(
            f"This QR code cannot be used here (expected '{expected}' code)",
            {"expected": expected, "actual": actual},
        )


class QRExpiredError(ValidationError):
    """Payload timestamp is outside the freshness window"""

    error_code = "QR_EXPIRED"

    def __init__(self, age_seconds: int, max_age_seconds: int):
        super().__init__(
            "QR code has expired. Please refresh the QR screen.",
            {"ageSeconds": age_seconds, "maxAgeSeconds": max_age_seconds},
        )


class WrongBrandError(ForbiddenError):
    """Redeem payload minted for another brand"""

    error_code = "WRONG_BRAND"

    def __init__(self, qr_brand_id: str):
        super().__init__("This QR code belongs to another brand", {"brandId": qr_brand_id})


class TooFastError(TooManyRequestsError):
    """Cooldown between stamps has not elapsed"""

    error_code = "TOO_FAST"

    def __init__(self, remaining_seconds: int):
        self.remaining_seconds = remaining_seconds
        super().__init__(
            f"Too fast! Try again in {remaining_seconds} seconds.",
            remaining_seconds,
            {"remainingSeconds": remaining_seconds},
        )


class InsufficientStampsError(ValidationError):
    """Balance is below the brand's redemption threshold"""

    error_code = "INSUFFICIENT_STAMPS"

    def __init__(self, stamps: int, stamps_required: int):
        self.shortfall = stamps_required - stamps
        super().__init__(
            f"Not enough stamps. {self.shortfall} more stamp(s) needed.",
            {
                "shortfall": self.shortfall,
                "stamps": stamps,
                "stampsRequired": stamps_required,
            },
        )


class CustomerNotFoundError(NotFoundError):
    error_code = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id):
        super().__init__(
            "Customer",
            customer_id,
            "Customer not found. Please sign out of the app and sign in again.",
        )


class MembershipNotFoundError(NotFoundError):
    error_code = "MEMBERSHIP_NOT_FOUND"

    def __init__(self, customer_id, brand_id):
        super().__init__("Membership", f"{customer_id}:{brand_id}", "Membership not found")


class LedgerInvariantError(APIError):
    """A write would leave the balance negative"""

    error_code = "LEDGER_INVARIANT"
