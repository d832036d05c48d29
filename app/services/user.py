from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.department import Department
from app.models.user import User
from app.services import graduation_requirement as requirement_service

import logging
logger = logging.getLogger("app.users")


def _check_department(db: Session, department_id):
    if department_id is None:
        return
    dept = db.query(Department.id).filter(Department.id == department_id, Department.is_active.is_(True)).first()
    if not dept:
        raise HTTPException(status_code=404, detail=f"Department {department_id} not found")


def apply_major_settings(
    db: Session,
    user: User,
    department_id: Optional[int],
    major_type: str,
    secondary_department_id: Optional[int],
) -> User:
    """
    Validate and set the user's departments and major type.
    A stored requirement follows the new major type so routing never mixes
    two programs. Does not commit.
    """
    if major_type == "single":
        secondary_department_id = None
    else:
        if secondary_department_id is None:
            raise HTTPException(status_code=400, detail=f"major_type '{major_type}' requires secondary_department_id")
        if secondary_department_id == department_id:
            raise HTTPException(status_code=400, detail="secondary_department_id must differ from department_id")

    _check_department(db, department_id)
    _check_department(db, secondary_department_id)

    user.department_id = department_id
    user.major_type = major_type
    user.secondary_department_id = secondary_department_id

    req = requirement_service.find_by_user(db, user.id)
    if req is not None and req.major_type != major_type:
        logger.info("[users] requirement major_type %s -> %s user=%s", req.major_type, major_type, user.id)
        req.major_type = major_type
    return user
