# backend/modules/loyalty/__init__.py

"""
Stamp card loyalty: the membership ledger, the QR transaction engine and
the read-side statistics built on top of them.
"""
