"""
Conversations API Router - read-only monitoring plus CSV export.

GET /conversations                      → conversations in the caller's snapshot
GET /conversations/export?bot_id=all    → CSV download (all, or one bot)
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from emailbots.application.transfer import export_conversations_csv
from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

logger = getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("")
@inject
async def list_conversations(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
    bot_id: str = Query(default="all"),
):
    conversations = registry.store_for(current_user).snapshot.conversations
    if bot_id != "all":
        conversations = tuple(c for c in conversations if c.bot_id == bot_id)
    return {"conversations": conversations}


@router.get("/export")
@inject
async def export_conversations(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
    bot_id: str = Query(default="all"),
):
    snapshot = registry.store_for(current_user).snapshot
    export = export_conversations_csv(snapshot.conversations, snapshot.bots, bot_id)
    logger.info(f"[EXPORT] {export.row_count} conversations → {export.filename}")
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
