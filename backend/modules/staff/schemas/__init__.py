from .staff_schemas import (
    StaffCreate,
    StaffUpdate,
    StaffOut,
    StaffMutationResponse,
    ResetPasswordRequest,
)
