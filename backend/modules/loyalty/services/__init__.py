from .ledger_service import LedgerService, membership_locks
from .scan_service import ScanService
from .membership_service import MembershipService
from .stats_service import StatsService

__all__ = [
    "LedgerService",
    "membership_locks",
    "ScanService",
    "MembershipService",
    "StatsService",
]
