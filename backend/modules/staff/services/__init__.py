from .staff_service import StaffService

__all__ = ["StaffService"]
