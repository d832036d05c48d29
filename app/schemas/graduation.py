from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.models.graduation_requirement import REQUIRED_MIN_PAIRS

MajorType = Literal["single", "double", "minor"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- requirement settings ---

class GraduationRequirementIn(CamelModel):
    """Partial update: fields left out keep their stored value."""

    major_type: Optional[MajorType] = None

    total_credits: Optional[int] = Field(None, ge=1)
    general_credits: Optional[int] = Field(None, ge=0)
    primary_major_credits: Optional[int] = Field(None, ge=0)
    primary_major_required_min: Optional[int] = Field(None, ge=0)

    secondary_major_credits: Optional[int] = Field(None, ge=0)
    secondary_major_required_min: Optional[int] = Field(None, ge=0)

    minor_credits: Optional[int] = Field(None, ge=0)
    minor_required_min: Optional[int] = Field(None, ge=0)
    minor_primary_major_min: Optional[int] = Field(None, ge=0)

    earned_total_credits: Optional[int] = Field(None, ge=0)
    earned_general_credits: Optional[int] = Field(None, ge=0)
    earned_primary_major_credits: Optional[int] = Field(None, ge=0)
    earned_primary_major_required_credits: Optional[int] = Field(None, ge=0)
    earned_secondary_major_credits: Optional[int] = Field(None, ge=0)
    earned_secondary_major_required_credits: Optional[int] = Field(None, ge=0)
    earned_minor_credits: Optional[int] = Field(None, ge=0)
    earned_minor_required_credits: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _required_min_within_credits(self):
        for min_field, credits_field in REQUIRED_MIN_PAIRS:
            lo = getattr(self, min_field)
            hi = getattr(self, credits_field)
            if lo is not None and hi is not None and lo > hi:
                raise ValueError(f"{to_camel(min_field)} must not exceed {to_camel(credits_field)}")
        return self


class GraduationRequirementOut(CamelModel):
    id: int
    user_id: int
    major_type: MajorType

    total_credits: int
    general_credits: int
    primary_major_credits: Optional[int] = None
    primary_major_required_min: Optional[int] = None

    secondary_major_credits: Optional[int] = None
    secondary_major_required_min: Optional[int] = None

    minor_credits: Optional[int] = None
    minor_required_min: Optional[int] = None
    minor_primary_major_min: Optional[int] = None

    earned_total_credits: int = 0
    earned_general_credits: int = 0
    earned_primary_major_credits: int = 0
    earned_primary_major_required_credits: int = 0
    earned_secondary_major_credits: int = 0
    earned_secondary_major_required_credits: int = 0
    earned_minor_credits: int = 0
    earned_minor_required_credits: int = 0


# --- progress ---

class RequiredMinOut(CamelModel):
    required: int
    earned: int
    planned: int
    percentage: int


class TrackProgressOut(CamelModel):
    required: int
    earned: int
    enrolled: int
    planned: int
    percentage: int


class MajorTrackProgressOut(TrackProgressOut):
    required_min: RequiredMinOut


class FloorProgressOut(CamelModel):
    required: int
    earned: int
    percentage: int


class CourseInfoOut(CamelModel):
    id: str
    code: str
    name: str
    credits: int


class CourseListsOut(CamelModel):
    completed: List[CourseInfoOut] = []
    enrolled: List[CourseInfoOut] = []
    planned: List[CourseInfoOut] = []


class GraduationProgressOut(CamelModel):
    total: TrackProgressOut
    primary_major: MajorTrackProgressOut
    general: TrackProgressOut
    secondary_major: Optional[MajorTrackProgressOut] = None
    minor: Optional[MajorTrackProgressOut] = None
    minor_primary_major_min: Optional[FloorProgressOut] = None
    courses: CourseListsOut


# --- add-course preview ---

class CreditSnapshotOut(CamelModel):
    credits: int
    percentage: int


class CourseAdditionPreviewOut(CamelModel):
    course_id: str
    credits: int
    category: str
    # primaryMajor / secondaryMajor / minor / general / total
    track: str
    before: CreditSnapshotOut
    after: CreditSnapshotOut
    total_before: CreditSnapshotOut
    total_after: CreditSnapshotOut
    # major tracks only: the major_required sub-minimum
    required_min_before: Optional[CreditSnapshotOut] = None
    required_min_after: Optional[CreditSnapshotOut] = None
