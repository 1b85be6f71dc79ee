# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from routers import auth, upload, sensors, locations, analysis, admin, dashboard, preferences
from database import create_tables, test_connection, SessionLocal
from middleware import RateLimitMiddleware, RateLimitRule, SecurityHeadersMiddleware
from services.seeding import seed_locations, seed_demo_sensors, ensure_admin
from config import config
import os
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Crowd Analyzer API",
    description="API for crowd density dashboards, sensors, locations and media analysis",
    version="1.0.0"
)

rate_limiter = RateLimitMiddleware(
    rules=[
        RateLimitRule(
            path_prefix="/api/",
            max_requests=config.API_RATE_LIMIT,
            window_seconds=config.API_RATE_WINDOW,
            message="Too many requests from this IP, please try again after 15 minutes",
        ),
        RateLimitRule(
            path_prefix="/api/upload",
            max_requests=config.UPLOAD_RATE_LIMIT,
            window_seconds=config.UPLOAD_RATE_WINDOW,
            message="Too many upload requests from this IP, please try again after a minute",
        ),
    ],
    enabled=config.RATE_LIMIT_ENABLED,
)

# Middleware registered last runs first: security headers wrap rate limiting, CORS wraps both
app.middleware("http")(rate_limiter)
app.middleware("http")(SecurityHeadersMiddleware())
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve stored uploads
os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")
logger.info(f"Mounted /uploads from {config.UPLOAD_DIR}")


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info("Starting Crowd Analyzer API...")

    if not test_connection():
        logger.error("Database connection failed! Check DATABASE_URL.")
        logger.warning("Continuing startup despite database issues...")
        return

    if not create_tables():
        return

    db = SessionLocal()
    try:
        seed_locations(db)
        if config.SEED_DEMO_DATA:
            seed_demo_sensors(db)
        ensure_admin(db, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    except Exception as e:
        logger.error(f"Error seeding startup data: {e}")
    finally:
        db.close()

    logger.info("Startup completed successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown"""
    logger.info("Shutting down Crowd Analyzer API...")


# Include routers
app.include_router(auth.router)
app.include_router(upload.router)
app.include_router(upload.livestream_router)
app.include_router(sensors.router)
app.include_router(locations.router)
app.include_router(analysis.router)
app.include_router(admin.router)
app.include_router(dashboard.router)
app.include_router(preferences.router)


@app.get("/")
def read_root():
    return {
        "message": "Crowd Analyzer API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "OK",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    try:
        db_status = test_connection()
        upload_status = os.access(config.UPLOAD_DIR, os.W_OK)

        return {
            "status": "healthy" if (db_status and upload_status) else "degraded",
            "service": "crowd-analyzer-api",
            "database": "connected" if db_status else "disconnected",
            "uploads": "writable" if upload_status else "unavailable",
            "version": "1.0.0"
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "service": "crowd-analyzer-api",
            "error": str(e),
            "version": "1.0.0"
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 5000)),
        reload=os.getenv("ENVIRONMENT") == "development",
        log_level="info"
    )
