from sqlalchemy import Column, Integer, String, Boolean
from app.database import Base

class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    college = Column(String(100), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
