from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from jobfillr.core.security import require_api_key
from jobfillr.schemas.templates import QuestionTemplate
from jobfillr.services import AutofillService, get_autofill_service

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/templates", response_model=list[QuestionTemplate])
def list_templates(service: AutofillService = Depends(get_autofill_service)):
    return list(service.catalog.all())


@router.get("/templates/category/{category}", response_model=list[QuestionTemplate])
def list_templates_by_category(category: str, service: AutofillService = Depends(get_autofill_service)):
    return list(service.catalog.list_by_category(category))


@router.get("/templates/{template_id}", response_model=QuestionTemplate)
def get_template(template_id: int, service: AutofillService = Depends(get_autofill_service)):
    template = service.catalog.find_by_id(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found.")
    return template
