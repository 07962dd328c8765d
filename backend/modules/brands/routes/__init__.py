from .branch_routes import router as branch_router
from .settings_routes import router as settings_router
from .cafe_routes import router as cafe_router

__all__ = ["branch_router", "settings_router", "cafe_router"]
