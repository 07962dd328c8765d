"""Exceptions for staff directory operations"""

from core.exceptions import NotFoundError, ValidationError


class StaffNotFoundError(NotFoundError):
    """Raised when a staff member is missing or belongs to another brand"""

    error_code = "STAFF_NOT_FOUND"

    def __init__(self, staff_id):
        super().__init__("BusinessUser", staff_id, "Staff member not found")


class InvalidStaffAssignmentError(ValidationError):
    """Raised when a role and branch combination cannot be stored"""

    error_code = "INVALID_STAFF_ASSIGNMENT"

    def __init__(self, reason: str):
        super().__init__(reason)
