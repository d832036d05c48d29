from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.department_requirement import DepartmentRequirementOut, RequirementAutofillOut
from app.schemas.graduation import MajorType
from app.services import department_requirement as dept_req_service

router = APIRouter(prefix="/department-requirements", tags=["Department Requirements"])


# only the asked-for program's keys are returned, explicit nulls included
@router.get("", response_model=RequirementAutofillOut, response_model_exclude_unset=True)
def requirement_autofill(
    department_id: int = Query(...),
    major_type: MajorType = Query(...),
    db: Session = Depends(get_db),
):
    if major_type == "single":
        data = dept_req_service.primary_requirements(db, department_id)
    else:
        data = dept_req_service.secondary_requirements(db, department_id, major_type)
    if data is None:
        raise HTTPException(status_code=404, detail="Department requirement not found")
    return RequirementAutofillOut(**data)


@router.get("/{department_id}", response_model=DepartmentRequirementOut)
def get_department_requirement(department_id: int, db: Session = Depends(get_db)):
    row = dept_req_service.find_by_department(db, department_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Department requirement not found")
    return row
