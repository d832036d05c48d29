from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class DepartmentRequirement(Base):
    """Reference graduation targets per department, one row per catalog year."""

    __tablename__ = "department_requirements"
    __table_args__ = (
        UniqueConstraint("department_id", "year", name="uq_department_requirement_year"),
        CheckConstraint("total_credits >= 1", name="ck_dept_req_total_credits_min"),
    )

    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False, default=2025)

    total_credits = Column(Integer, nullable=False)
    general_credits = Column(Integer, nullable=True)

    # this department as a single (primary) major
    single_major_credits = Column(Integer, nullable=True)
    single_required_min = Column(Integer, nullable=True)

    # this department as the second major of a double major
    double_major_credits = Column(Integer, nullable=True)
    double_required_min = Column(Integer, nullable=True)

    # this department as a minor
    minor_major_credits = Column(Integer, nullable=True)
    minor_required_min = Column(Integer, nullable=True)
    minor_primary_major_min = Column(Integer, nullable=True)

    # e.g. ["single", "double"]
    available_major_types = Column(JSON, nullable=False, default=lambda: ["single"])

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    department = relationship("Department")
