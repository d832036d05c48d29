from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.graduation_requirement import GraduationRequirement, EARNED_COLUMNS, REQUIRED_MIN_PAIRS

import logging
logger = logging.getLogger("app.graduation")

DEFAULT_REQUIREMENT = {
    "major_type": "single",
    "total_credits": 120,
    "primary_major_credits": 63,
    "primary_major_required_min": 24,
    "general_credits": 30,
    **{c: 0 for c in EARNED_COLUMNS},
}

# a new row can't be created without these
REQUIRED_ON_CREATE = ("total_credits", "general_credits")


def find_by_user(db: Session, user_id: int) -> Optional[GraduationRequirement]:
    return (
        db.query(GraduationRequirement)
        .filter(GraduationRequirement.user_id == user_id)
        .first()
    )


def _check_required_mins(req: GraduationRequirement):
    for min_field, credits_field in REQUIRED_MIN_PAIRS:
        lo = getattr(req, min_field)
        hi = getattr(req, credits_field)
        if lo is not None and hi is not None and lo > hi:
            raise HTTPException(
                status_code=400,
                detail=f"{min_field} ({lo}) must not exceed {credits_field} ({hi})",
            )


def merge(db: Session, user_id: int, data: dict) -> GraduationRequirement:
    """
    Merge ``data`` into the user's requirement, creating it when missing.
    Does not commit; the caller owns the transaction.
    """
    req = find_by_user(db, user_id)
    if req is None:
        missing = [k for k in REQUIRED_ON_CREATE if data.get(k) is None]
        if missing:
            raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(missing)}")
        req = GraduationRequirement(user_id=user_id)
        db.add(req)

    for k, v in data.items():
        if v is None and k in REQUIRED_ON_CREATE + EARNED_COLUMNS + ("major_type",):
            # not nullable, treat explicit null as "leave as is"
            continue
        setattr(req, k, v)

    # stored values count too, not only the ones in this payload
    _check_required_mins(req)
    return req


def upsert(db: Session, user_id: int, data: dict) -> GraduationRequirement:
    try:
        req = merge(db, user_id, data)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.exception("[requirement] upsert failed user=%s", user_id)
        raise HTTPException(status_code=400, detail="Graduation requirement could not be saved")

    db.refresh(req)
    logger.info("[requirement] upsert user=%s fields=%s", user_id, sorted(data))
    return req

def remove(db: Session, user_id: int) -> bool:
    req = find_by_user(db, user_id)
    if req is None:
        return False
    db.delete(req)
    db.commit()
    return True


def create_defaults(db: Session, user_id: int) -> GraduationRequirement:
    req = GraduationRequirement(user_id=user_id, **DEFAULT_REQUIREMENT)
    db.add(req)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Graduation requirement already exists")
    db.refresh(req)
    logger.info("[requirement] defaults created user=%s", user_id)
    return req
