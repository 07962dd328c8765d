# backend/modules/staff/__init__.py

"""
Business staff directory: listing, creation, updates and soft deactivation
under the role policy.
"""
