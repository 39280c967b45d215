"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter
from slowapi import Limiter

from franchise_saas.api.v1.endpoints import auth, checklists, dealers, health, users


def build_api_router(limiter: Limiter) -> APIRouter:
    api_router = APIRouter()

    # Registration, login, refresh, logout, /me
    api_router.include_router(auth.build_router(limiter))

    # Own profile
    api_router.include_router(users.router)

    # Franchise-owner views of the tenant
    api_router.include_router(dealers.router)

    # Checklists & KPI
    api_router.include_router(checklists.router)

    # Liveness / readiness
    api_router.include_router(health.router)

    return api_router
