# backend/core/deps.py

"""
Common dependencies for the application
"""

from datetime import datetime
from typing import Callable

from .database import get_db
from .auth import (
    get_current_customer,
    get_current_business_user,
    require_role,
    require_owner,
    require_manager,
)

Clock = Callable[[], datetime]


def get_clock() -> Clock:
    """Naive UTC wall clock used by time-window checks.

    Tests override this dependency to move time forward without sleeping.
    """
    return datetime.utcnow


__all__ = [
    "Clock",
    "get_clock",
    "get_db",
    "get_current_customer",
    "get_current_business_user",
    "require_role",
    "require_owner",
    "require_manager",
]
