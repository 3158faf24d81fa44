"""
API Router

Mounts every feature router under a single router that main.py
includes at the /api prefix.
"""

from fastapi import APIRouter

from restaurant_backend.routes import payments

api_router = APIRouter()

# Mount routes
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

__all__ = ["api_router"]
