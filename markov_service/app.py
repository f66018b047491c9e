"""
Markov Chain Service
Main application entry point

Serves named word-level Markov chains: train from text, generate with or
without a seed, merge chains, and save/load them as JSON files.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from markov_service.config import settings
from markov_service.services.registry import get_registry
from markov_service.utils.logger import setup_logger

# Setup logging
logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for service initialization"""
    logger.info("[BOOT] Starting Markov chain service...")
    logger.info(f"[BOOT] Chain data dir: {settings.CHAIN_DATA_DIR}")

    registry = get_registry()
    app.state.registry = registry

    try:
        if settings.AUTOLOAD_CHAINS:
            loaded = registry.load_all()
            logger.info(f"[BOOT] Chains available: {', '.join(loaded) or '(none)'}")

        logger.info("[BOOT] Markov chain service ready!")
        yield

    except Exception as e:
        logger.error(f"[ERR] Failed to initialize: {e}", exc_info=True)
        raise
    finally:
        logger.info("[SHUTDOWN] Cleaning up...")
        if settings.AUTOSAVE:
            for name in registry.names():
                try:
                    registry.save(name)
                except OSError as e:
                    logger.error(f"[SHUTDOWN] Could not save chain '{name}': {e}")
        logger.info("[SHUTDOWN] Markov chain service stopped")


# Create FastAPI app
app = FastAPI(
    title="Markov Chain Service",
    description="Weighted word-level Markov chains with JSON persistence",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": {
                "code": "MARKOV_SERVICE_ERROR",
                "message": "Internal server error occurred",
                "details": {"type": type(exc).__name__},
            },
        },
    )


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "ok": True,
        "data": {
            "status": "healthy",
            "service": settings.SERVICE_NAME,
            "chains": get_registry().names(),
        },
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "markov": "/markov/*",
        },
    }


from markov_service.api.routers import markov_router

app.include_router(markov_router.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "markov_service.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
