# fifo_inventory/api/main.py

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
import uvicorn
import logging
import decimal
from decimal import getcontext

from fifo_inventory.api.errors import register_exception_handlers
from fifo_inventory.api.v1.router import router as v1_router
from fifo_inventory.core.config.settings import settings

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(settings.APP_NAME)

# Set global Decimal precision at application startup.
# Request handlers run on worker threads, whose contexts are copied from DefaultContext.
getcontext().prec = settings.DECIMAL_PRECISION
decimal.DefaultContext.prec = settings.DECIMAL_PRECISION

# Create FastAPI app instance
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG_MODE,
    description="API for tracking product inventory with FIFO lot costing."
)

register_exception_handlers(app)

# Include API routers
app.include_router(v1_router, prefix=settings.API_V1_STR)

@app.get("/", include_in_schema=False)
async def root():
    """Redirects to the API documentation."""
    return RedirectResponse(url="/docs")

# Entry point for running with Uvicorn directly (for development)
if __name__ == "__main__":
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} in {'DEBUG' if settings.DEBUG_MODE else 'PRODUCTION'} mode...")
    uvicorn.run(
        "fifo_inventory.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG_MODE,
        log_level=settings.LOG_LEVEL.lower()
    )
