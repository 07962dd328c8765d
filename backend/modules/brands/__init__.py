# backend/modules/brands/__init__.py

"""
Brand and branch directory: branch CRUD, brand settings and the public cafe
listing.
"""
