from .scan_routes import router as scan_router
from .membership_routes import membership_router, activity_router, qr_router
from .business_stats_routes import router as business_stats_router

__all__ = [
    "scan_router",
    "membership_router",
    "activity_router",
    "qr_router",
    "business_stats_router",
]
