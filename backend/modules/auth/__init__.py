# backend/modules/auth/__init__.py

"""
Customer and business identity: registration, login, profiles and the
role policy applied to business actors.
"""
