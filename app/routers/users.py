from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.user import UserOut, UserUpdateIn
from app.services import graduation_requirement as requirement_service
from app.services import plan as plan_service
from app.services import user as user_service
from app.utils.auth import get_current_user

import logging
logger = logging.getLogger("app.users")


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserOut)
def get_my_account(user: User = Depends(get_current_user)):
    return user


@router.put("/me", response_model=UserOut)
def update_my_account(body: UserUpdateIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    data = body.model_dump(exclude_unset=True)

    if "name" in data:
        user.name = data["name"]

    try:
        user_service.apply_major_settings(
            db,
            user,
            department_id=data.get("department_id", user.department_id),
            major_type=data.get("major_type") or user.major_type or "single",
            secondary_department_id=data.get("secondary_department_id", user.secondary_department_id),
        )
    except HTTPException:
        db.rollback()
        raise

    db.commit()
    db.refresh(user)
    return user


@router.delete("/me")
def delete_my_account(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    user_id = user.id
    plans = plan_service.delete_all_by_user(db, user_id)
    req = requirement_service.find_by_user(db, user_id)
    if req is not None:
        db.delete(req)
    db.delete(user)
    db.commit()

    logger.info("[users] deleted user=%s plans=%d requirement=%s", user_id, plans, req is not None)
    return {"message": "Account deleted", "deleted_plans": plans, "deleted_requirement": req is not None}
