from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database import Base

class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("credits >= 1 AND credits <= 6", name="ck_courses_credits_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)

    credits = Column(Integer, nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)

    # major_required / major_compulsory / major_elective / general_required /
    # general_elective / free_elective / teaching, NULL = free_elective
    category = Column(String(30), nullable=True, index=True)

    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)

    # relationship
    department = relationship("Department")
