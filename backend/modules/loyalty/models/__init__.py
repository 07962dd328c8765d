# backend/modules/loyalty/models/__init__.py

from .loyalty_models import ActivityType, Membership, Activity

__all__ = ["ActivityType", "Membership", "Activity"]
