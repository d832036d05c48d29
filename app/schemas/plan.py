from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field

Term = Literal["spring", "fall"]
CourseStatus = Literal["planned", "enrolled", "completed", "failed"]
Category = Literal[
    "major_required",
    "major_compulsory",
    "major_elective",
    "general_required",
    "general_elective",
    "free_elective",
    "teaching",
]


class PlanCourseBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    credits: int
    category: Optional[str] = None
    department_id: Optional[int] = None


class PlannedCourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course: PlanCourseBriefOut
    status: CourseStatus
    grade: Optional[str] = None
    category: Optional[str] = None


class SemesterOut(BaseModel):
    year: int
    term: Term
    courses: List[PlannedCourseOut] = []


class PlanOut(BaseModel):
    id: int
    name: str
    semesters: List[SemesterOut] = []


class SemesterIn(BaseModel):
    year: int = Field(..., ge=1900, le=2200)
    term: Term


class PlanCourseIn(SemesterIn):
    course_id: int


class CourseStatusIn(PlanCourseIn):
    status: CourseStatus
    grade: Optional[str] = Field(None, max_length=5)
    category: Optional[Category] = None


class MoveCourseIn(BaseModel):
    course_id: int
    source_year: int
    source_term: Term
    dest_year: int = Field(..., ge=1900, le=2200)
    dest_term: Term
