"""API router for Ask April endpoints."""

from fastapi import APIRouter

from askapril.api import assessment, contact, copilot, daily_ripple

router = APIRouter()

# Accountability assessment scoring and company analytics
router.include_router(assessment.router, tags=["assessment"])

# AI co-pilot document wizard
router.include_router(copilot.router, prefix="/copilot", tags=["copilot"])

# Daily Ripple episodes
router.include_router(daily_ripple.router, prefix="/ripple", tags=["ripple"])

# Contact form and newsletter
router.include_router(contact.router, tags=["contact"])
