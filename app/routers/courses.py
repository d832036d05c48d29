from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.course import Course
from app.models.department import Department
from app.schemas.course import CourseOut, CourseListOut

router = APIRouter(prefix="/courses", tags=["Courses"])


def _to_out(c: Course, dept_name: Optional[str]) -> CourseOut:
    return CourseOut(
        id=c.id,
        code=c.code,
        name=c.name,
        credits=int(c.credits or 0),
        category=c.category,
        department_id=c.department_id,
        department_name=dept_name,
        description=c.description,
    )


@router.get("", response_model=CourseListOut)
def list_courses(
    db: Session = Depends(get_db),
    q: Optional[str] = Query(None, description="code or name contains"),
    department_id: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    query = (
        db.query(Course, Department.name)
        .outerjoin(Department, Department.id == Course.department_id)
        .filter(Course.is_active.is_(True))
    )

    if q and q.strip():
        kw = f"%{q.strip()}%"
        query = query.filter(or_(Course.code.ilike(kw), Course.name.ilike(kw)))
    if department_id is not None:
        query = query.filter(Course.department_id == department_id)
    if category:
        query = query.filter(Course.category == category)

    total = query.count()
    rows = (
        query.order_by(Course.code.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return CourseListOut(
        items=[_to_out(c, dept_name) for c, dept_name in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    row = (
        db.query(Course, Department.name)
        .outerjoin(Department, Department.id == Course.department_id)
        .filter(Course.id == course_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Course not found")
    return _to_out(row[0], row[1])
