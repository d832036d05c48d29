from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default="student")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # single / double / minor
    major_type = Column(String(10), nullable=False, default="single")
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    secondary_department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)

    enrollment_year = Column(Integer, nullable=True)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
