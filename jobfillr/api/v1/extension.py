from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from jobfillr.core.rate_limit import rate_limit
from jobfillr.core.security import current_user_id
from jobfillr.schemas.answers import ResolvedAnswer
from jobfillr.schemas.api import ResolveBatchRequest, ResolveBatchResponse, ResolveRequest
from jobfillr.services import AutofillService, get_autofill_service

router = APIRouter()


@router.post("/extension/resolve", response_model=ResolvedAnswer)
@rate_limit()
def resolve_field(
    request: Request,
    payload: ResolveRequest,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.resolve(user_id, payload.observed(), payload.context())


@router.post("/extension/resolve-batch", response_model=ResolveBatchResponse)
@rate_limit()
def resolve_fields(
    request: Request,
    payload: ResolveBatchRequest,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    results = service.resolve_batch(user_id, payload.fields, payload.context())
    return ResolveBatchResponse(results=results)
