from fastapi import APIRouter

from app.api.routes import booking

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(booking.router, prefix="/booking", tags=["booking"])
