import logging

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from modules.auth.models import BusinessUser
from modules.auth.permissions import StaffAction, authorize
from .directory_service import DirectoryService
from ..schemas.brand_schemas import (
    BranchOut,
    BusinessInfo,
    SettingsOut,
    SettingsUpdate,
    LoyaltyProgramOut,
    LoyaltyProgramUpdate,
)

logger = logging.getLogger(__name__)

LOYALTY_SETTING_FIELDS = ("is_active", "validity_days", "max_stamps_per_day")


class SettingsService:
    """Brand profile, branch contact details and the loyalty program."""

    def __init__(self, db: Session):
        self.db = db
        self.directory = DirectoryService(db)

    def get_settings(self, actor: BusinessUser) -> SettingsOut:
        brand = self.directory.get_brand(actor.brand_id)
        authorize(actor, StaffAction.VIEW_SETTINGS, brand)

        branch = self.directory.find_branch(actor.branch_id)
        return SettingsOut(
            business_info=BusinessInfo(
                name=brand.name,
                category=brand.category or "",
                stamps_required=brand.stamps_required,
                reward_name=brand.reward_name,
                email=actor.email,
            ),
            branch=BranchOut.model_validate(branch) if branch else None,
        )

    def update_settings(self, actor: BusinessUser, data: SettingsUpdate) -> None:
        """
        Apply a settings form.

        Brand fields are changed only by owners. Branch fields apply to the
        actor's own branch and require the same right as editing it from
        the branch screen.
        """
        brand = self.directory.get_brand(actor.brand_id)

        if data.business_info is not None:
            authorize(actor, StaffAction.UPDATE_BRAND_SETTINGS, brand)
            for field, value in data.business_info.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(brand, field, value)

        if data.branch is not None and actor.branch_id:
            branch = self.directory.get_branch(actor.branch_id)
            authorize(actor, StaffAction.UPDATE_BRANCH, branch)
            for field, value in data.branch.model_dump(exclude_unset=True).items():
                setattr(branch, field, value)

        self.db.commit()
        logger.info(f"Settings for brand {brand.id} updated by {actor.id}")

    @staticmethod
    def _loyalty_out(brand) -> LoyaltyProgramOut:
        loyalty = brand.effective_loyalty_settings
        return LoyaltyProgramOut(
            stamps_required=brand.stamps_required,
            reward_name=brand.reward_name,
            is_active=loyalty["isActive"],
            validity_days=loyalty["validityDays"],
            max_stamps_per_day=loyalty["maxStampsPerDay"],
        )

    def get_loyalty_program(self, actor: BusinessUser) -> LoyaltyProgramOut:
        brand = self.directory.get_brand(actor.brand_id)
        authorize(actor, StaffAction.VIEW_SETTINGS, brand)
        return self._loyalty_out(brand)

    def update_loyalty_program(
        self, actor: BusinessUser, data: LoyaltyProgramUpdate
    ) -> LoyaltyProgramOut:
        brand = self.directory.get_brand(actor.brand_id)
        authorize(actor, StaffAction.UPDATE_LOYALTY_CONFIG, brand)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "stamps_required" in changes:
            brand.stamps_required = changes["stamps_required"]
        if "reward_name" in changes:
            brand.reward_name = changes["reward_name"]

        settings_changes = {
            to_camel(field): changes[field]
            for field in LOYALTY_SETTING_FIELDS
            if field in changes
        }
        if settings_changes:
            # Reassign so the JSON column is flagged dirty
            brand.loyalty_settings = {**(brand.loyalty_settings or {}), **settings_changes}

        self.db.commit()
        self.db.refresh(brand)

        logger.info(
            f"Loyalty program for brand {brand.id} updated by {actor.id}: "
            f"stamps_required={brand.stamps_required}"
        )
        return self._loyalty_out(brand)
