from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from jobfillr.core.rate_limit import rate_limit
from jobfillr.core.security import current_user_id
from jobfillr.schemas.answers import UserAnswer
from jobfillr.schemas.api import SubmitAnswerRequest
from jobfillr.services import AutofillService, get_autofill_service

router = APIRouter()


@router.get("/answers", response_model=list[UserAnswer])
def list_answers(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.list_answers(user_id)


@router.post("/answers", response_model=UserAnswer)
@rate_limit()
def submit_answer(
    request: Request,
    payload: SubmitAnswerRequest,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.submit_answer(user_id, payload.template_id, payload.answer)


@router.delete("/answers/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_answer(
    template_id: int,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    if not service.delete_answer(user_id, template_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found.")


@router.get("/answers/{template_id}", response_model=UserAnswer)
def get_answer(
    template_id: int,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    answer = service.get_answer(user_id, template_id)
    if answer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Answer not found.")
    return answer
