"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/meal-generator/ via the v1_prefix configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from meal_generator.api.v1.endpoints import health, meals


router = APIRouter()

router.include_router(health.router)
router.include_router(meals.router)
