from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.plan import Plan
from app.schemas.plan import (
    PlanOut, SemesterOut, PlannedCourseOut, PlanCourseBriefOut,
    SemesterIn, PlanCourseIn, CourseStatusIn, MoveCourseIn,
)
from app.services import plan as plan_service
from app.utils.auth import get_current_user

router = APIRouter(prefix="/plans/me", tags=["Student - Plan"])


def plan_to_out(plan: Plan) -> PlanOut:
    semesters = []
    for s in plan.sorted_semesters():
        courses = [
            PlannedCourseOut(
                course=PlanCourseBriefOut.model_validate(pc.course, from_attributes=True),
                status=pc.status,
                grade=pc.grade,
                category=pc.category,
            )
            for pc in s.courses
            if pc.course is not None
        ]
        semesters.append(SemesterOut(year=s.year, term=s.term, courses=courses))
    return PlanOut(id=plan.id, name=plan.name, semesters=semesters)


@router.get("", response_model=PlanOut)
def get_my_plan(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return plan_to_out(plan_service.find_or_create(db, user.id))


@router.post("/semesters", response_model=PlanOut)
def add_semester(body: SemesterIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.add_semester(db, user.id, body.year, body.term)
    return plan_to_out(plan)


@router.delete("/semesters", response_model=PlanOut)
def remove_semester(body: SemesterIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.remove_semester(db, user.id, body.year, body.term)
    return plan_to_out(plan)


@router.post("/semesters/clear", response_model=PlanOut)
def clear_semester(body: SemesterIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.clear_semester(db, user.id, body.year, body.term)
    return plan_to_out(plan)


@router.post("/courses", response_model=PlanOut)
def add_course(body: PlanCourseIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.add_course(db, user.id, body.year, body.term, body.course_id)
    return plan_to_out(plan)


@router.delete("/courses", response_model=PlanOut)
def remove_course(body: PlanCourseIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.remove_course(db, user.id, body.year, body.term, body.course_id)
    return plan_to_out(plan)


@router.patch("/courses/status", response_model=PlanOut)
def update_course_status(body: CourseStatusIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.update_course(
        db, user.id, body.year, body.term, body.course_id,
        status=body.status, grade=body.grade, category=body.category,
    )
    return plan_to_out(plan)


@router.post("/courses/move", response_model=PlanOut)
def move_course(body: MoveCourseIn, db: Session = Depends(get_db), user=Depends(get_current_user)):
    plan = plan_service.move_course(
        db, user.id, body.course_id,
        body.source_year, body.source_term,
        body.dest_year, body.dest_term,
    )
    return plan_to_out(plan)


@router.delete("", response_model=PlanOut)
def reset_my_plan(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return plan_to_out(plan_service.reset(db, user.id))
