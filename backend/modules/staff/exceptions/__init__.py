from .staff_exceptions import StaffNotFoundError, InvalidStaffAssignmentError

__all__ = ["StaffNotFoundError", "InvalidStaffAssignmentError"]
