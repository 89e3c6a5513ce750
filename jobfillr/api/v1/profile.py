from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from jobfillr.core.security import current_user_id
from jobfillr.schemas.answers import CompletionReport
from jobfillr.schemas.api import DeleteUserResponse, SkillsRequest, UserDataExport
from jobfillr.schemas.profile import (
    Education,
    EducationData,
    PersonalInfo,
    Profile,
    ProfileSnapshot,
    WorkExperience,
    WorkExperienceData,
)
from jobfillr.services import AutofillService, get_autofill_service

router = APIRouter()


def _not_found(kind: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found.")


@router.get("/profile", response_model=ProfileSnapshot)
def get_profile(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.get_profile(user_id)


@router.get("/profile/completion", response_model=CompletionReport)
def get_profile_completion(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.get_profile_completion(user_id)


@router.put("/profile/personal-info", response_model=Profile)
def save_personal_info(
    payload: PersonalInfo,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.save_personal_info(user_id, payload)


@router.put("/profile/skills", response_model=Profile)
def save_skills(
    payload: SkillsRequest,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.save_skills(user_id, payload.skills)


@router.post("/profile/work-experiences", response_model=WorkExperience, status_code=status.HTTP_201_CREATED)
def add_work_experience(
    payload: WorkExperienceData,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.add_work_experience(user_id, payload)


@router.put("/profile/work-experiences/{entry_id}", response_model=WorkExperience)
def update_work_experience(
    entry_id: int,
    payload: WorkExperienceData,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    entry = service.update_work_experience(user_id, entry_id, payload)
    if entry is None:
        raise _not_found("Work experience")
    return entry


@router.delete("/profile/work-experiences/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_work_experience(
    entry_id: int,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    if not service.delete_work_experience(user_id, entry_id):
        raise _not_found("Work experience")


@router.post("/profile/educations", response_model=Education, status_code=status.HTTP_201_CREATED)
def add_education(
    payload: EducationData,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.add_education(user_id, payload)


@router.put("/profile/educations/{entry_id}", response_model=Education)
def update_education(
    entry_id: int,
    payload: EducationData,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    entry = service.update_education(user_id, entry_id, payload)
    if entry is None:
        raise _not_found("Education")
    return entry


@router.delete("/profile/educations/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_education(
    entry_id: int,
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    if not service.delete_education(user_id, entry_id):
        raise _not_found("Education")


@router.post("/profile/reset", response_model=Profile)
def reset_profile(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.reset_profile(user_id)


@router.get("/profile/export", response_model=UserDataExport)
def export_account_data(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return service.export_user_data(user_id)


@router.delete("/profile", response_model=DeleteUserResponse)
def delete_account_data(
    user_id: int = Depends(current_user_id),
    service: AutofillService = Depends(get_autofill_service),
):
    return DeleteUserResponse(deleted=service.delete_user_data(user_id))
