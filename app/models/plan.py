from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

TERM_ORDER = {"spring": 0, "fall": 1}


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String(100), nullable=False, default="My plan")

    version_id = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    semesters = relationship(
        "PlanSemester",
        back_populates="plan",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}

    def sorted_semesters(self):
        return sorted(self.semesters, key=lambda s: (s.year, TERM_ORDER.get(s.term, 2)))

    def find_semester(self, year: int, term: str):
        for s in self.semesters:
            if s.year == year and s.term == term:
                return s
        return None

    def find_entry(self, course_id: int):
        for s in self.semesters:
            for entry in s.courses:
                if entry.course_id == course_id:
                    return entry
        return None


class PlanSemester(Base):
    __tablename__ = "plan_semesters"
    __table_args__ = (
        UniqueConstraint("plan_id", "year", "term", name="uq_plan_semesters_plan_year_term"),
    )

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    # spring / fall
    term = Column(String(10), nullable=False)

    plan = relationship("Plan", back_populates="semesters")
    courses = relationship(
        "PlannedCourse",
        back_populates="semester",
        cascade="all, delete-orphan",
        order_by="PlannedCourse.position",
    )


class PlannedCourse(Base):
    __tablename__ = "planned_courses"
    __table_args__ = (
        # a course lives in one semester plan-wide
        UniqueConstraint("plan_id", "course_id", name="uq_planned_courses_plan_course"),
    )

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    semester_id = Column(Integer, ForeignKey("plan_semesters.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    # planned / enrolled / completed / failed
    status = Column(String(20), nullable=False, default="planned")
    grade = Column(String(5), nullable=True)
    # curriculum override of Course.category
    category = Column(String(30), nullable=True)
    position = Column(Integer, nullable=False, default=0)

    semester = relationship("PlanSemester", back_populates="courses")
    course = relationship("Course")
