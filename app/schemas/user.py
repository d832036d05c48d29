from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

class UserBase(BaseModel):
    username: str

class UserCreate(UserBase):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=72)
    name: Optional[str] = Field(None, max_length=50)

class UserOut(UserBase):
    id: int
    role: str
    name: Optional[str] = None
    major_type: str = "single"
    department_id: Optional[int] = None
    secondary_department_id: Optional[int] = None
    enrollment_year: Optional[int] = None
    onboarding_completed: bool = False
    model_config = ConfigDict(from_attributes=True)

class UserUpdateIn(BaseModel):
    name: Optional[str] = Field(None, max_length=50)
    department_id: Optional[int] = None
    major_type: Optional[Literal["single", "double", "minor"]] = None
    secondary_department_id: Optional[int] = None
