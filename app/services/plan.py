from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.models.course import Course
from app.models.plan import Plan, PlanSemester, PlannedCourse

import logging
logger = logging.getLogger("app.plans")

VERSION_RETRIES = 3


def with_version_retry(db: Session, fn, max_retries: int = VERSION_RETRIES):
    """
    Run ``fn`` and commit. ``fn`` must re-read the plan itself, so a
    StaleDataError (someone else bumped plans.version_id) just runs it again.
    IntegrityError is rolled back and reported as 400.
    """
    for attempt in range(max_retries):
        try:
            result = fn()
            db.commit()
            return result
        except StaleDataError:
            db.rollback()
            logger.info("[plan] version conflict, attempt %d/%d", attempt + 1, max_retries)
            if attempt == max_retries - 1:
                raise HTTPException(status_code=409, detail="Plan was modified concurrently, please retry")
        except IntegrityError:
            db.rollback()
            logger.exception("[plan] constraint violation")
            raise HTTPException(status_code=400, detail="Plan change violates a constraint")
        except HTTPException:
            db.rollback()
            raise


def _touch(plan: Plan):
    # emits UPDATE plans ... so version_id moves on every edit
    plan.updated_at = datetime.now(timezone.utc)


def _next_position(semester: PlanSemester) -> int:
    return max((c.position for c in semester.courses), default=-1) + 1


def _ensure_semester(plan: Plan, year: int, term: str) -> PlanSemester:
    semester = plan.find_semester(year, term)
    if semester is None:
        semester = PlanSemester(year=year, term=term)
        plan.semesters.append(semester)
    return semester


def find_by_user(db: Session, user_id: int):
    return db.query(Plan).filter(Plan.user_id == user_id).first()


def find_or_create(db: Session, user_id: int) -> Plan:
    plan = find_by_user(db, user_id)
    if plan:
        return plan

    plan = Plan(user_id=user_id)
    db.add(plan)
    try:
        db.commit()
    except IntegrityError:
        # created by a parallel request
        db.rollback()
        return find_by_user(db, user_id)

    db.refresh(plan)
    logger.info("[plan] created plan=%s user=%s", plan.id, user_id)
    return plan


def add_semester(db: Session, user_id: int, year: int, term: str) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        if plan.find_semester(year, term):
            raise HTTPException(status_code=400, detail="Semester already exists")
        if len(plan.semesters) >= settings.MAX_SEMESTERS:
            raise HTTPException(status_code=400, detail=f"At most {settings.MAX_SEMESTERS} semesters allowed")
        plan.semesters.append(PlanSemester(year=year, term=term))
        _touch(plan)
        return plan

    return with_version_retry(db, op)


def remove_semester(db: Session, user_id: int, year: int, term: str) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        semester = plan.find_semester(year, term)
        if semester is not None:
            plan.semesters.remove(semester)
            _touch(plan)
        return plan

    return with_version_retry(db, op)


def clear_semester(db: Session, user_id: int, year: int, term: str) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        semester = plan.find_semester(year, term)
        if semester is not None:
            semester.courses.clear()
            _touch(plan)
        return plan

    return with_version_retry(db, op)


def add_course(db: Session, user_id: int, year: int, term: str, course_id: int) -> Plan:
    course = db.get(Course, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    def op():
        plan = find_or_create(db, user_id)

        # already somewhere in the plan: nothing to do
        if plan.find_entry(course_id) is not None:
            return plan

        semester = plan.find_semester(year, term)
        if semester is None:
            if len(plan.semesters) >= settings.MAX_SEMESTERS:
                raise HTTPException(status_code=400, detail=f"At most {settings.MAX_SEMESTERS} semesters allowed")
            semester = _ensure_semester(plan, year, term)

        if len(semester.courses) >= settings.MAX_COURSES_PER_SEMESTER:
            raise HTTPException(
                status_code=400,
                detail=f"At most {settings.MAX_COURSES_PER_SEMESTER} courses per semester",
            )

        semester.courses.append(
            PlannedCourse(
                plan_id=plan.id,
                course_id=course.id,
                status="planned",
                position=_next_position(semester),
            )
        )
        _touch(plan)
        return plan

    plan = with_version_retry(db, op)
    logger.info("[plan] add course=%s %s-%s user=%s", course_id, year, term, user_id)
    return plan


def remove_course(db: Session, user_id: int, year: int, term: str, course_id: int) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        semester = plan.find_semester(year, term)
        if semester is None:
            raise HTTPException(status_code=404, detail="Semester not found")

        for entry in list(semester.courses):
            if entry.course_id == course_id:
                semester.courses.remove(entry)
                _touch(plan)
        return plan

    return with_version_retry(db, op)


def update_course(
    db: Session,
    user_id: int,
    year: int,
    term: str,
    course_id: int,
    status: str,
    grade=None,
    category=None,
) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        semester = plan.find_semester(year, term)
        entry = None
        if semester is not None:
            entry = next((c for c in semester.courses if c.course_id == course_id), None)
        if entry is None:
            raise HTTPException(status_code=404, detail="Course not found in semester")

        entry.status = status
        if grade:
            entry.grade = grade
        if category:
            entry.category = category
        _touch(plan)
        return plan

    return with_version_retry(db, op)


def move_course(
    db: Session,
    user_id: int,
    course_id: int,
    source_year: int,
    source_term: str,
    dest_year: int,
    dest_term: str,
) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        source = plan.find_semester(source_year, source_term)
        if source is None:
            raise HTTPException(status_code=404, detail="Source semester not found")

        entry = next((c for c in source.courses if c.course_id == course_id), None)
        if entry is None:
            raise HTTPException(status_code=404, detail="Course not found in source semester")

        if (source_year, source_term) == (dest_year, dest_term):
            return plan

        dest = plan.find_semester(dest_year, dest_term)
        if dest is None:
            if len(plan.semesters) >= settings.MAX_SEMESTERS:
                raise HTTPException(status_code=400, detail=f"At most {settings.MAX_SEMESTERS} semesters allowed")
            dest = _ensure_semester(plan, dest_year, dest_term)

        if len(dest.courses) >= settings.MAX_COURSES_PER_SEMESTER:
            raise HTTPException(
                status_code=400,
                detail=f"At most {settings.MAX_COURSES_PER_SEMESTER} courses per semester",
            )

        entry.position = _next_position(dest)
        entry.semester = dest
        _touch(plan)
        return plan

    return with_version_retry(db, op)


def reset(db: Session, user_id: int) -> Plan:
    def op():
        plan = find_or_create(db, user_id)
        plan.semesters.clear()
        _touch(plan)
        return plan

    return with_version_retry(db, op)


def delete_all_by_user(db: Session, user_id: int) -> int:
    """Used on account deletion. Caller commits."""
    plans = db.query(Plan).filter(Plan.user_id == user_id).all()
    for plan in plans:
        db.delete(plan)
    return len(plans)
