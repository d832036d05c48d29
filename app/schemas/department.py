from typing import Optional
from pydantic import BaseModel, ConfigDict

class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    college: Optional[str] = None
