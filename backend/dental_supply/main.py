"""
Dental Supply - Backend API
Storefront and back-office REST API for the dental supply catalog
"""
import logging
import time
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dental_supply.api import admin, auth, orders, products, reviews, variants
from dental_supply.core.config import settings
from dental_supply.core.database import get_db_connection_dict_with_retry
from dental_supply.core.exceptions import register_exception_handlers
from dental_supply.core.rate_limit import RateLimitMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

app.add_middleware(RateLimitMiddleware)

# CORS is added last so it wraps every response, including 429s
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
prefix = settings.API_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"])
app.include_router(products.router, prefix=f"{prefix}/products", tags=["Products"])
app.include_router(variants.router, prefix=f"{prefix}/product-variants", tags=["Variants"])
app.include_router(reviews.router, prefix=f"{prefix}/product-reviews", tags=["Reviews"])
app.include_router(orders.router, prefix=f"{prefix}/orders", tags=["Orders"])
app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["Admin"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health():
    """Health check for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Single attempt, this has to answer fast
        conn = get_db_connection_dict_with_retry(max_retries=1)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except psycopg2.Error as e:
        logger.warning(f"Health check could not reach the database: {e}")
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "dental-supply-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error
        },
        "total_latency_ms": total_latency_ms
    }


logger.info(f"{settings.API_TITLE} {settings.API_VERSION} ready, routes under {prefix}")
