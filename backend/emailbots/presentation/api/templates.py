"""Email Templates API Router."""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from emailbots.application.dto import TemplateCreate, TemplateUpdate
from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
@inject
async def list_templates(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return {"templates": registry.store_for(current_user).snapshot.templates}


@router.post("", status_code=status.HTTP_201_CREATED)
@inject
async def create_template(
    request: TemplateCreate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).add_template(request)


@router.patch("/{template_id}")
@inject
async def update_template(
    template_id: str,
    request: TemplateUpdate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).update_template(template_id, request)


@router.delete("/{template_id}")
@inject
async def delete_template(
    template_id: str,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    await registry.store_for(current_user).delete_template(template_id)
    return {"success": True}
