from typing import List, Optional

from app.schemas.graduation import CamelModel, MajorType


class DepartmentRequirementOut(CamelModel):
    id: int
    department_id: int
    year: int
    total_credits: int
    general_credits: Optional[int] = None
    single_major_credits: Optional[int] = None
    single_required_min: Optional[int] = None
    double_major_credits: Optional[int] = None
    double_required_min: Optional[int] = None
    minor_major_credits: Optional[int] = None
    minor_required_min: Optional[int] = None
    minor_primary_major_min: Optional[int] = None
    available_major_types: List[MajorType] = []


class RequirementAutofillOut(CamelModel):
    """
    Requirement targets taken from a department row.

    ``single`` fills the primary-major fields, ``double`` and ``minor`` fill the
    fields of the second program. Only the fields of the asked-for program are
    set; the keys use the same names as GraduationRequirementIn.
    """

    total_credits: Optional[int] = None
    general_credits: Optional[int] = None
    primary_major_credits: Optional[int] = None
    primary_major_required_min: Optional[int] = None

    secondary_major_credits: Optional[int] = None
    secondary_major_required_min: Optional[int] = None

    minor_credits: Optional[int] = None
    minor_required_min: Optional[int] = None
    minor_primary_major_min: Optional[int] = None
