"""
MediStore Backend: medicine storefront API.

ARCHITECTURE:
- Catalog store: medicines, stock, prescription flags
- Cart store: one cart per shopper (X-User-Id), quantity-merge on add
- Order workflow: frozen order snapshots + admin-driven status lifecycle
- Checkout: cart -> order -> empty cart, one transaction

PRESCRIPTION MODEL:
- Any cart line with requires_prescription blocks checkout until a
  prescription is uploaded
- Such orders go through pending_verification before they can be verified
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import admin, cart, checkout, medicines, orders
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.db.init_db import init_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    1. Create database tables
    2. Seed the catalog when empty (SEED_CATALOG)
    """
    logger.info("[*] Initializing database...")
    init_db()
    logger.info("[OK] Database initialized")

    yield

    logger.info("[*] Shutting down")


app = FastAPI(
    title="MediStore API",
    description="Medicine storefront: catalog, cart, checkout with prescriptions, admin order review.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Accept",
        "Origin",
        "X-User-Id",
    ],  # Explicit headers only
    max_age=600,  # Cache preflight for 10 minutes
)


@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"  # Prevent MIME sniffing
    response.headers["X-Frame-Options"] = "DENY"  # Prevent clickjacking
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


register_exception_handlers(app)

app.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
app.include_router(cart.router, prefix="/cart", tags=["cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
app.include_router(orders.router, prefix="/orders", tags=["orders"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])


@app.get("/health")
def health():
    return {"status": "ok", "environment": settings.ENVIRONMENT}
