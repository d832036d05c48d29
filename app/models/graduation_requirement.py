from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from app.database import Base

CREDIT_COLUMNS = (
    "total_credits",
    "general_credits",
    "primary_major_credits",
    "primary_major_required_min",
    "secondary_major_credits",
    "secondary_major_required_min",
    "minor_credits",
    "minor_required_min",
    "minor_primary_major_min",
)

# (floor, track credits): a floor may not exceed its track
REQUIRED_MIN_PAIRS = (
    ("primary_major_required_min", "primary_major_credits"),
    ("secondary_major_required_min", "secondary_major_credits"),
    ("minor_required_min", "minor_credits"),
)

EARNED_COLUMNS = (
    "earned_total_credits",
    "earned_general_credits",
    "earned_primary_major_credits",
    "earned_primary_major_required_credits",
    "earned_secondary_major_credits",
    "earned_secondary_major_required_credits",
    "earned_minor_credits",
    "earned_minor_required_credits",
)


class GraduationRequirement(Base):
    __tablename__ = "graduation_requirements"
    __table_args__ = (
        CheckConstraint("total_credits >= 1", name="ck_grad_req_total_credits_min"),
        *[
            CheckConstraint(f"{c} >= 0", name=f"ck_grad_req_{c}_non_negative")
            for c in CREDIT_COLUMNS[1:] + EARNED_COLUMNS
        ],
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # single / double / minor
    major_type = Column(String(10), nullable=False, default="single")

    total_credits = Column(Integer, nullable=False)
    general_credits = Column(Integer, nullable=False)
    primary_major_credits = Column(Integer, nullable=True)
    primary_major_required_min = Column(Integer, nullable=True)

    # double major only
    secondary_major_credits = Column(Integer, nullable=True)
    secondary_major_required_min = Column(Integer, nullable=True)

    # minor only
    minor_credits = Column(Integer, nullable=True)
    minor_required_min = Column(Integer, nullable=True)
    minor_primary_major_min = Column(Integer, nullable=True)

    # credits earned before/outside the planner
    earned_total_credits = Column(Integer, nullable=False, default=0)
    earned_general_credits = Column(Integer, nullable=False, default=0)
    earned_primary_major_credits = Column(Integer, nullable=False, default=0)
    earned_primary_major_required_credits = Column(Integer, nullable=False, default=0)
    earned_secondary_major_credits = Column(Integer, nullable=False, default=0)
    earned_secondary_major_required_credits = Column(Integer, nullable=False, default=0)
    earned_minor_credits = Column(Integer, nullable=False, default=0)
    earned_minor_required_credits = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
