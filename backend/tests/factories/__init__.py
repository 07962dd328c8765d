# backend/tests/factories/__init__.py

"""
Shared test factories for the stamp card backend.
"""

from .base import BaseFactory, bind_factory_session
from .directory import BrandFactory, BranchFactory
from .identity import CustomerFactory, BusinessUserFactory, DEFAULT_PASSWORD

__all__ = [
    # Base
    'BaseFactory',
    'bind_factory_session',

    # Brand & branch directory
    'BrandFactory',
    'BranchFactory',

    # Identity
    'CustomerFactory',
    'BusinessUserFactory',
    'DEFAULT_PASSWORD',
]
