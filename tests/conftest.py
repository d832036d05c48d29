import os
import tempfile

# must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="course-planner-logs-"))

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.course import Course
from app.models.department import Department
from app.models.department_requirement import DepartmentRequirement


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_department(db):
    def _make(code, name=None, college=None):
        dept = Department(code=code, name=name or code, college=college, is_active=True)
        db.add(dept)
        db.commit()
        return dept.id
    return _make


@pytest.fixture
def make_course(db):
    def _make(code, credits, category, department_id, name=None):
        course = Course(
            code=code,
            name=name or f"Course {code}",
            credits=credits,
            category=category,
            department_id=department_id,
            is_active=True,
        )
        db.add(course)
        db.commit()
        return course.id
    return _make


@pytest.fixture
def make_department_requirement(db):
    def _make(department_id, year=2025, total_credits=130, **fields):
        row = DepartmentRequirement(department_id=department_id, year=year, total_credits=total_credits, **fields)
        db.add(row)
        db.commit()
        return row.id
    return _make


@pytest.fixture
def register(client):
    """Register + log in, return auth headers."""
    def _register(username="student1", password="secret123"):
        r = client.post("/auth/register", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        r = client.post("/auth/login", data={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}
    return _register


@pytest.fixture
def auth(register):
    return register()
