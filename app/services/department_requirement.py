from typing import Optional

from sqlalchemy.orm import Session

from app.models.department_requirement import DepartmentRequirement

import logging
logger = logging.getLogger("app.graduation")


def find_by_department(db: Session, department_id: int) -> Optional[DepartmentRequirement]:
    """Latest catalog year for the department."""
    return (
        db.query(DepartmentRequirement)
        .filter(DepartmentRequirement.department_id == department_id)
        .order_by(DepartmentRequirement.year.desc())
        .first()
    )


def primary_requirements(db: Session, department_id: int) -> Optional[dict]:
    """A primary major always uses the department's single-major column."""
    row = find_by_department(db, department_id)
    if row is None:
        return None
    return {
        "total_credits": row.total_credits,
        "general_credits": row.general_credits,
        "primary_major_credits": row.single_major_credits,
        "primary_major_required_min": row.single_required_min,
    }


def secondary_requirements(db: Session, department_id: int, major_type: str) -> Optional[dict]:
    """Second-program targets: the ``double`` or ``minor`` column of the secondary department."""
    row = find_by_department(db, department_id)
    if row is None:
        return None
    if major_type == "double":
        return {
            "secondary_major_credits": row.double_major_credits,
            "secondary_major_required_min": row.double_required_min,
        }
    return {
        "minor_credits": row.minor_major_credits,
        "minor_required_min": row.minor_required_min,
        "minor_primary_major_min": row.minor_primary_major_min,
    }


def autofill(db: Session, department_id: int, major_type: str, secondary_department_id: Optional[int] = None) -> dict:
    """
    Requirement fields for a whole program: the primary department's single
    values plus, for double/minor, the secondary department's values.
    Missing rows contribute nothing; None values are dropped.
    """
    data = primary_requirements(db, department_id) or {}
    if major_type != "single" and secondary_department_id is not None:
        data.update(secondary_requirements(db, secondary_department_id, major_type) or {})
    if not data:
        logger.info("[requirement] no department requirement for dept=%s", department_id)
    return {k: v for k, v in data.items() if v is not None}
