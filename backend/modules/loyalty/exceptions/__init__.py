from .scan_exceptions import (
    InvalidQRFormatError,
    WrongQRPurposeError,
    QRExpiredError,
    WrongBrandError,
    TooFastError,
    InsufficientStampsError,
    CustomerNotFoundError,
    MembershipNotFoundError,
    LedgerInvariantError,
)

__all__ = [
    "InvalidQRFormatError",
    "WrongQRPurposeError",
    "QRExpiredError",
    "WrongBrandError",
    "TooFastError",
    "InsufficientStampsError",
    "CustomerNotFoundError",
    "MembershipNotFoundError",
    "LedgerInvariantError",
]
