# backend/modules/auth/models/__init__.py

from .user_models import BusinessRole, Customer, BusinessUser

__all__ = ["BusinessRole", "Customer", "BusinessUser"]
