"""
Storefront Admin API
Main FastAPI application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from storefront.config import get_settings
from storefront.utils.logger import log
from storefront import __version__

# Import routers
from storefront.api import health, auth, stores, analytics, sales_goals
from storefront.middleware.auth_middleware import AuthMiddleware

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    log.info(f"Starting {settings.app_name} v{__version__}")
    log.info(f"Environment: {settings.environment}")

    try:
        from storefront.models.base import init_db, SessionLocal
        init_db()
        log.info("Database initialized")

        # Seed initial admin user if configured
        from storefront.services import auth_service
        db = SessionLocal()
        try:
            auth_service.seed_initial_user(db)
        finally:
            db.close()
    except Exception as e:
        log.error(f"Database initialization error: {str(e)}")

    yield

    log.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="""
    Storefront admin backend

    - Customer RFM segmentation (recency / frequency / monetary quintiles)
    - Sales goals with progress and pacing for the current day, week or month
    - Product performance and sales by country
    """,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session-based authentication middleware
app.add_middleware(AuthMiddleware)

app.add_middleware(GZipMiddleware, minimum_size=500)

# Include routers
app.include_router(auth.router)
app.include_router(health.router, tags=["health"])
app.include_router(stores.router)
app.include_router(analytics.router)
app.include_router(sales_goals.router)


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "app": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "login": "POST /auth/login",
            "stores": "GET /stores",
            "customer_segmentation": "GET /stores/{store_id}/analytics/customer-segmentation",
            "product_performance": "GET /stores/{store_id}/analytics/product-performance",
            "sales_by_country": "GET /stores/{store_id}/analytics/sales-by-country",
            "sales_goals": "GET|POST /stores/{store_id}/sales-goals",
            "delete_sales_goal": "DELETE /stores/{store_id}/sales-goals/{goal_id}",
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
