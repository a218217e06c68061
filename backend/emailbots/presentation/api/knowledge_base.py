"""
Knowledge Base API Router.

Website sources may be sent without a scheme; they are stored with https://.
"""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from emailbots.application.dto import KnowledgeBaseItemCreate, KnowledgeBaseItemUpdate
from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

router = APIRouter(prefix="/knowledge-base", tags=["knowledge-base"])


@router.get("")
@inject
async def list_items(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return {"items": registry.store_for(current_user).snapshot.knowledge_base}


@router.post("", status_code=status.HTTP_201_CREATED)
@inject
async def create_item(
    request: KnowledgeBaseItemCreate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).add_knowledge_base(request)


@router.patch("/{item_id}")
@inject
async def update_item(
    item_id: str,
    request: KnowledgeBaseItemUpdate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).update_knowledge_base(item_id, request)


@router.delete("/{item_id}")
@inject
async def delete_item(
    item_id: str,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    await registry.store_for(current_user).delete_knowledge_base(item_id)
    return {"success": True}
