from typing import Optional

from pydantic import Field

from app.schemas.graduation import CamelModel, GraduationRequirementIn, GraduationRequirementOut, MajorType
from app.schemas.user import UserOut


class OnboardingIn(CamelModel):
    department_id: int
    major_type: MajorType = "single"
    secondary_department_id: Optional[int] = None
    enrollment_year: int = Field(..., ge=2000, le=2100)
    # left out: filled from the department requirement table
    graduation_requirements: Optional[GraduationRequirementIn] = None


class OnboardingOut(CamelModel):
    user: UserOut
    graduation_requirement: GraduationRequirementOut
