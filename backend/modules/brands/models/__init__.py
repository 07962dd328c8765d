# backend/modules/brands/models/__init__.py

from .brand_models import Brand, Branch, DEFAULT_LOYALTY_SETTINGS

__all__ = ["Brand", "Branch", "DEFAULT_LOYALTY_SETTINGS"]
