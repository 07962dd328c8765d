"""Exceptions for brand and branch directory operations"""

from core.exceptions import NotFoundError, ValidationError


class BrandNotFoundError(NotFoundError):
    error_code = "BRAND_NOT_FOUND"

    def __init__(self, brand_id):
        super().__init__("Brand", brand_id, "Cafe not found")


class BranchNotFoundError(NotFoundError):
    error_code = "BRANCH_NOT_FOUND"

    def __init__(self, branch_id):
        super().__init__("Branch", branch_id, "Branch not found")


class NoBranchForBrandError(ValidationError):
    """Raised when an owner scans for a brand that has no branches yet"""

    error_code = "NO_BRANCH_FOR_BRAND"

    def __init__(self, brand_id):
        super().__init__(
            "No branch found for this brand. Create a branch first.",
            {"brandId": brand_id},
        )


class BranchNotEmptyError(ValidationError):
    """Raised when deleting a branch that still has staff or history"""

    error_code = "BRANCH_NOT_EMPTY"

    def __init__(self, branch_id, staff_count: int, activity_count: int):
        super().__init__(
            "This branch has staff or transaction history and cannot be deleted. "
            "Move or deactivate its staff first.",
            {
                "branchId": branch_id,
                "staffCount": staff_count,
                "activityCount": activity_count,
            },
        )
