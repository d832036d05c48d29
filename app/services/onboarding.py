"""
First-run setup: the user's program and graduation requirement are written
in one transaction, so the requirement's major type and the user's
departments always describe the same program.
"""
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.onboarding import OnboardingIn
from app.services import department_requirement as dept_req_service
from app.services import graduation_requirement as requirement_service
from app.services import user as user_service

import logging
logger = logging.getLogger("app.users")


def requirement_payload(db: Session, user_id: int, body: OnboardingIn) -> dict:
    if body.graduation_requirements is not None:
        data = body.graduation_requirements.model_dump(exclude_unset=True)
    else:
        data = {}
        if requirement_service.find_by_user(db, user_id) is None:
            data.update(requirement_service.DEFAULT_REQUIREMENT)
        data.update(
            dept_req_service.autofill(db, body.department_id, body.major_type, body.secondary_department_id)
        )
    # the user's program decides, whatever the payload says
    data["major_type"] = body.major_type
    return data


def complete_onboarding(db: Session, user: User, body: OnboardingIn):
    try:
        user_service.apply_major_settings(
            db,
            user,
            department_id=body.department_id,
            major_type=body.major_type,
            secondary_department_id=body.secondary_department_id,
        )
        user.enrollment_year = body.enrollment_year
        user.onboarding_completed = True

        req = requirement_service.merge(db, user.id, requirement_payload(db, user.id, body))
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.exception("[onboarding] failed user=%s", user.id)
        raise HTTPException(status_code=400, detail="Onboarding could not be saved")

    db.refresh(user)
    db.refresh(req)
    logger.info("[onboarding] completed user=%s major_type=%s", user.id, user.major_type)
    return user, req
