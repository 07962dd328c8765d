from .brand_schemas import (
    BranchCreate,
    BranchUpdate,
    BranchOut,
    BranchMutationResponse,
    BranchStats,
    BrandSummary,
    BrandOut,
    NearbyBranchOut,
    BusinessInfo,
    SettingsOut,
    SettingsUpdate,
    LoyaltyProgramOut,
    LoyaltyProgramUpdate,
    LoyaltyProgramUpdateResponse,
)
