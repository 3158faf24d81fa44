"""
FastAPI Application Entry Point

Restaurant Ordering Backend - Hybrid Architecture
Supports both a mock payment gateway (development) and Stripe (production).

Endpoints:
    - GET /: API root
    - GET /health: System health check
    - /api/payments/*: Checkout sessions and payment intents

Author: Khalil_Bannouri
Version: 3.1.0
"""

import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from restaurant_backend.core.config import get_settings, setup_logging
from restaurant_backend.routes import api_router
from restaurant_backend.schemas import HealthResponse
from restaurant_backend.services.payment import (
    PaymentError,
    PaymentService,
    get_payment_service,
)

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    # Validate production config before the gateway is built
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    payment_service = get_payment_service()
    logger.info(f"✅ Payment Gateway: {payment_service.provider_name}")
    logger.info(f"✅ Currency: {payment_service.config.currency}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant ordering backend with hosted checkout and payment intents. "
        "Supports a mock gateway for development and Stripe for production."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍔 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    payment_service: PaymentService = Depends(get_payment_service),
) -> HealthResponse:
    """Verify the payment gateway is reachable."""
    gateway_ok = await payment_service.gateway.health_check()

    return HealthResponse(
        status="operational" if gateway_ok else "degraded",
        environment=settings.env_mode.value,
        payment_gateway=(
            f"{payment_service.provider_name}: "
            f"{'healthy' if gateway_ok else 'unhealthy'}"
        ),
        timestamp=datetime.now(),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(PaymentError)
async def payment_exception_handler(request: Request, exc: PaymentError) -> JSONResponse:
    """Return the generic payment error; gateway details stay in the logs."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
