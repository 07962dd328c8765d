from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

# ========== Identity ==========
from modules.auth.routes.auth_routes import router as auth_router
from modules.auth.routes.business_auth_routes import router as business_auth_router
from modules.auth.routes.user_routes import router as user_router

# ========== Brand & Branch Directory ==========
from modules.brands.routes.cafe_routes import router as cafe_router
from modules.brands.routes.branch_routes import router as branch_router
from modules.brands.routes.settings_routes import router as settings_router

# ========== Staff Management ==========
from modules.staff.routes.staff_routes import router as staff_router

# ========== Loyalty ==========
from modules.loyalty.routes.scan_routes import router as scan_router
from modules.loyalty.routes.membership_routes import (
    membership_router,
    activity_router,
    qr_router,
)
from modules.loyalty.routes.business_stats_routes import router as business_stats_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks()
    yield


app = FastAPI(
    title="Stamp Card API",
    description="""
    Multi-tenant loyalty stamp cards for coffee brands.

    Customers collect stamps by showing a QR code at any branch of a brand
    and redeem a reward once the brand's threshold is reached. Owners,
    branch managers and staff manage branches, staff accounts and view
    reports from the business dashboard.

    ## Authentication

    Customer endpoints take a token from `/auth/login`, `/auth/register`
    or `/auth/demo`. Business endpoints take a token from
    `/business-auth/login`. The two token kinds are not interchangeable.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Customer surface
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(user_router, prefix=settings.api_prefix)
app.include_router(cafe_router, prefix=settings.api_prefix)
app.include_router(membership_router, prefix=settings.api_prefix)
app.include_router(activity_router, prefix=settings.api_prefix)
app.include_router(qr_router, prefix=settings.api_prefix)

# Business surface
app.include_router(business_auth_router, prefix=settings.api_prefix)
app.include_router(scan_router, prefix=settings.api_prefix)
app.include_router(staff_router, prefix=settings.api_prefix)
app.include_router(branch_router, prefix=settings.api_prefix)
app.include_router(settings_router, prefix=settings.api_prefix)
app.include_router(business_stats_router, prefix=settings.api_prefix)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok", "environment": settings.environment}


@app.get("/")
def read_root():
    return {"message": "Stamp card backend is running"}
