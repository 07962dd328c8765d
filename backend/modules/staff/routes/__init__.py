from .staff_routes import router as staff_router

__all__ = ["staff_router"]
