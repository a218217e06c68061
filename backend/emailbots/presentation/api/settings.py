"""
Settings API Router - process-local dashboard settings.

GET   /settings       → current settings
PATCH /settings       → merge a partial update (per section, per field) and validate
POST  /settings/save  → validate and record the current settings
"""

from typing import Any

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Body, Depends

from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
@inject
async def get_settings(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return registry.store_for(current_user).snapshot.settings


@router.patch("")
@inject
async def update_settings(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
    partial: dict[str, Any] = Body(...),
):
    return registry.store_for(current_user).update_settings(partial)


@router.post("/save")
@inject
async def save_settings(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return registry.store_for(current_user).save_settings()
