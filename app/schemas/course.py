from typing import Optional, List
from pydantic import BaseModel, ConfigDict

class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    credits: int
    category: Optional[str] = None
    department_id: int
    department_name: Optional[str] = None
    description: Optional[str] = None


class CourseListOut(BaseModel):
    items: List[CourseOut]
    total: int
    page: int
    page_size: int
