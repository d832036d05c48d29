from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.graduation import (
    GraduationRequirementIn,
    GraduationRequirementOut,
    GraduationProgressOut,
    CourseAdditionPreviewOut,
)
from app.services import graduation_requirement as requirement_service
from app.services.graduation_progress import calculate_progress, preview_course_addition
from app.utils.auth import get_current_user

import logging
logger = logging.getLogger("app.graduation")

router = APIRouter(prefix="/graduation-requirements", tags=["Graduation Requirements"])


@router.get("", response_model=Optional[GraduationRequirementOut])
def get_my_requirement(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return requirement_service.find_by_user(db, user.id)


@router.put("", response_model=GraduationRequirementOut)
def upsert_my_requirement(
    body: GraduationRequirementIn,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return requirement_service.upsert(db, user.id, body.model_dump(exclude_unset=True))


@router.delete("")
def delete_my_requirement(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return {"deleted": requirement_service.remove(db, user.id)}


@router.post("/defaults", response_model=GraduationRequirementOut)
def create_default_requirement(db: Session = Depends(get_db), user=Depends(get_current_user)):
    if requirement_service.find_by_user(db, user.id):
        raise HTTPException(status_code=400, detail="Graduation requirement already exists")
    return requirement_service.create_defaults(db, user.id)


# null = requirement not configured yet
@router.get(
    "/progress",
    response_model=Optional[GraduationProgressOut],
    response_model_exclude_none=True,
)
def my_progress(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return calculate_progress(db, user.id)


@router.get(
    "/progress/preview",
    response_model=Optional[CourseAdditionPreviewOut],
    response_model_exclude_none=True,
)
def my_progress_preview(
    course_id: int = Query(...),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return preview_course_addition(db, user.id, course_id)
