"""API v1 module."""

from fastapi import APIRouter

from template_store.api.v1.endpoints import templates

api_router = APIRouter()

api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
