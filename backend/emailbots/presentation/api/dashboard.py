"""
Dashboard API Router - load and read the caller's snapshot.

POST /dashboard/initialize            → (re)load all five collections
GET  /dashboard/snapshot              → current snapshot, no remote calls
POST /dashboard/reconcile-assistants  → retry provisioning for pending bots
POST /dashboard/sign-out              → drop the caller's store from the registry
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends

from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

logger = getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.post("/initialize")
@inject
async def initialize(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    store = registry.store_for(current_user)
    return await store.initialize()


@router.get("/snapshot")
@inject
async def get_snapshot(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return registry.store_for(current_user).snapshot


@router.post("/reconcile-assistants")
@inject
async def reconcile_assistants(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    report = await registry.store_for(current_user).reconcile_assistants()
    return {"provisioned": report.provisioned, "failed": report.failed}


@router.post("/sign-out")
@inject
async def sign_out(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return {"success": True, "dropped": registry.drop(current_user)}
