"""
SuperMall - Backend API
Storefront API for shops, products, offers, carts and orders
"""
import time
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supermall.core.config import settings
from supermall.core.database import get_db_connection_with_retry, CONNECTION_TIMEOUT
from supermall.core.logging_config import configure_logging
from supermall.core.rate_limit import RateLimitMiddleware

# Import API routers
from supermall.api import auth, cart, categories, chat, compare, dashboard, notifications, offers, orders, products, shops, wishlist

configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

ALLOWED_ORIGINS = settings.get_allowed_origins()

# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)
app.add_middleware(RateLimitMiddleware)

# Include API routers
app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(categories.locations_router, prefix="/api/v1/locations", tags=["Locations"])
app.include_router(shops.router, prefix="/api/v1/shops", tags=["Shops"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(offers.router, prefix="/api/v1/offers", tags=["Offers"])
app.include_router(wishlist.router, prefix="/api/v1/wishlist", tags=["Wishlist"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
app.include_router(compare.router, prefix="/api/v1/compare", tags=["Compare"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(auth.router)

# Shopping assistant
app.include_router(chat.router)


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "SuperMall API",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION,
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Test database connection with minimal retry (fast check)
        conn = get_db_connection_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    status = "healthy" if db_status == "connected" else "degraded"

    return {
        "status": status,
        "service": "supermall-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT,
        },
        "total_latency_ms": total_latency_ms,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
