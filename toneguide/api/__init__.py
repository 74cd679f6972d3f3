"""API router for v1 endpoints."""

from fastapi import APIRouter

from toneguide.api import guidelines, history, rewrite

router = APIRouter()

# Variant generation
router.include_router(rewrite.router, tags=["rewrite"])

# Applied-text history per target
router.include_router(history.router, tags=["history"])

# Guideline corpus inspection
router.include_router(guidelines.router, tags=["guidelines"])
