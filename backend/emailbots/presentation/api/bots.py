"""
Bots API Router.

GET    /bots           → bots in the caller's snapshot
POST   /bots           → create (assistant provisioning continues in background)
PATCH  /bots/{bot_id}  → partial update
DELETE /bots/{bot_id}
POST   /bots/{bot_id}/api-key    → issue or rotate the bot API key (shown once)
GET    /bots/{bot_id}/assistant  → assistant reference, authenticated by X-Bot-Api-Key
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, Header, status

from emailbots.application.dto import BotCreate, BotUpdate
from emailbots.application.queries import AuthenticateBotHandler, AuthenticateBotQuery
from emailbots.application.store import StoreOperationError
from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

logger = getLogger(__name__)

router = APIRouter(prefix="/bots", tags=["bots"])


@router.get("")
@inject
async def list_bots(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return {"bots": registry.store_for(current_user).snapshot.bots}


@router.post("", status_code=status.HTTP_201_CREATED)
@inject
async def create_bot(
    request: BotCreate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).add_bot(request)


@router.patch("/{bot_id}")
@inject
async def update_bot(
    bot_id: str,
    request: BotUpdate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).update_bot(bot_id, request)


@router.delete("/{bot_id}")
@inject
async def delete_bot(
    bot_id: str,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    await registry.store_for(current_user).delete_bot(bot_id)
    return {"success": True}


@router.post("/{bot_id}/api-key", status_code=status.HTTP_201_CREATED)
@inject
async def issue_api_key(
    bot_id: str,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    issued = await registry.store_for(current_user).issue_bot_api_key(bot_id)
    return {"bot_id": issued.bot_id, "api_key": issued.api_key}


@router.get("/{bot_id}/assistant")
@inject
async def get_assistant(
    bot_id: str,
    handler: FromDishka[AuthenticateBotHandler],
    api_key: str = Header(..., alias="X-Bot-Api-Key"),
):
    result = await handler.execute(AuthenticateBotQuery(bot_id=bot_id, api_key=api_key))
    if not result.success:
        logger.info(f"[BOTS] Rejected API key for bot {bot_id}")
        raise StoreOperationError(result.error, result.error_code)
    bot = result.data
    return {
        "bot_id": bot.id,
        "assistant_id": bot.assistant_id,
        "assistant_model": bot.assistant_model,
        "assistant_status": bot.assistant_status,
    }
