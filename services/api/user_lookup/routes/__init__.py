"""API routes."""

from fastapi import APIRouter

from user_lookup.routes import users

api_router = APIRouter()

# User lookup (read-through cache)
api_router.include_router(users.router, tags=["users"])
