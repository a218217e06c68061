"""
Fine-Tuning Questions API Router.

GET    /fine-tuning/questions
POST   /fine-tuning/questions
PATCH  /fine-tuning/questions/{question_id}  (bot_ids, when sent, replaces all associations)
POST   /fine-tuning/bulk-delete              → per-item results, 207 if any failed
POST   /fine-tuning/import                   → .csv / .xlsx upload, per-row results
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from emailbots.application.dto import FineTuningQuestionCreate, FineTuningQuestionUpdate
from emailbots.application.store import BatchDeleteError, BatchDeleteResult
from emailbots.application.transfer import parse_question_upload
from emailbots.presentation.dependencies.auth import AuthUser, get_current_user
from emailbots.presentation.store_registry import StoreRegistry

logger = getLogger(__name__)

router = APIRouter(prefix="/fine-tuning", tags=["fine-tuning"])


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(min_length=1)


def _batch_body(result: BatchDeleteResult) -> dict:
    return {
        "success": result.success,
        "deleted": result.succeeded,
        "items": jsonable_encoder(result.items),
    }


@router.get("/questions")
@inject
async def list_questions(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return {"questions": registry.store_for(current_user).snapshot.fine_tuning_questions}


@router.post("/questions", status_code=status.HTTP_201_CREATED)
@inject
async def create_question(
    request: FineTuningQuestionCreate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).add_fine_tuning_question(request)


@router.patch("/questions/{question_id}")
@inject
async def update_question(
    question_id: str,
    request: FineTuningQuestionUpdate,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    return await registry.store_for(current_user).update_fine_tuning_question(
        question_id, request
    )


@router.post("/bulk-delete")
@inject
async def bulk_delete(
    request: BulkDeleteRequest,
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
):
    store = registry.store_for(current_user)
    try:
        result = await store.delete_fine_tuning_questions(request.ids)
    except BatchDeleteError as e:
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content={**_batch_body(e.result), "error": e.message},
        )
    return _batch_body(result)


@router.post("/import")
@inject
async def import_questions(
    registry: FromDishka[StoreRegistry],
    current_user: AuthUser = Depends(get_current_user),
    file: UploadFile = File(...),
):
    rows = parse_question_upload(await file.read(), file.filename)
    outcomes = await registry.store_for(current_user).import_fine_tuning_questions(rows)
    return {
        "imported": sum(1 for o in outcomes if o.success),
        "failed": sum(1 for o in outcomes if not o.success),
        "results": outcomes,
    }
