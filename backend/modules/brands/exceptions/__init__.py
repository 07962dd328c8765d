from .directory_exceptions import (
    BrandNotFoundError,
    BranchNotFoundError,
    NoBranchForBrandError,
    BranchNotEmptyError,
)

__all__ = [
    "BrandNotFoundError",
    "BranchNotFoundError",
    "NoBranchForBrandError",
    "BranchNotEmptyError",
]
