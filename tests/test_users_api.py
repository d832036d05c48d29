"""
Auth, account settings, account deletion, and the read-only catalog.
"""

from app.models.graduation_requirement import GraduationRequirement
from app.models.plan import Plan
from app.models.user import User


class TestAuth:
    def test_register_and_me(self, client, auth):
        r = client.get("/auth/me", headers=auth)
        assert r.status_code == 200
        body = r.json()
        assert body["username"] == "student1"
        assert body["role"] == "student"
        assert body["major_type"] == "single"

    def test_duplicate_username(self, client, auth):
        r = client.post("/auth/register", json={"username": "student1", "password": "secret123"})
        assert r.status_code == 400

    def test_wrong_password(self, client, auth):
        r = client.post("/auth/login", data={"username": "student1", "password": "nope-nope"})
        assert r.status_code == 403

    def test_bad_token(self, client):
        r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert r.status_code == 403

    def test_missing_token(self, client):
        assert client.get("/users/me").status_code == 401


class TestAccountSettings:
    def test_set_departments(self, client, auth, make_department):
        cs = make_department("CS")
        math = make_department("MATH")

        r = client.put(
            "/users/me",
            json={"name": "Kim", "department_id": cs, "major_type": "double", "secondary_department_id": math},
            headers=auth,
        )
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["name"] == "Kim"
        assert body["department_id"] == cs
        assert body["major_type"] == "double"
        assert body["secondary_department_id"] == math

    def test_double_needs_secondary(self, client, auth, make_department):
        cs = make_department("CS")
        r = client.put("/users/me", json={"department_id": cs, "major_type": "double"}, headers=auth)
        assert r.status_code == 400

    def test_secondary_must_differ(self, client, auth, make_department):
        cs = make_department("CS")
        r = client.put(
            "/users/me",
            json={"department_id": cs, "major_type": "minor", "secondary_department_id": cs},
            headers=auth,
        )
        assert r.status_code == 400

    def test_single_clears_secondary(self, client, auth, make_department):
        cs = make_department("CS")
        math = make_department("MATH")
        client.put(
            "/users/me",
            json={"department_id": cs, "major_type": "minor", "secondary_department_id": math},
            headers=auth,
        )

        r = client.put("/users/me", json={"major_type": "single"}, headers=auth)
        assert r.status_code == 200
        assert r.json()["secondary_department_id"] is None
        assert r.json()["department_id"] == cs

    def test_unknown_department(self, client, auth):
        r = client.put("/users/me", json={"department_id": 4242}, headers=auth)
        assert r.status_code == 404


class TestAccountDeletion:
    def test_deletes_plan_and_requirement(self, client, auth, db, make_department, make_course):
        course_id = make_course("CS101", 3, "major_required", make_department("CS"))
        client.post("/graduation-requirements/defaults", headers=auth)
        client.post("/plans/me/courses", json={"year": 2024, "term": "spring", "course_id": course_id}, headers=auth)

        r = client.delete("/users/me", headers=auth)
        assert r.status_code == 200
        assert r.json()["deleted_plans"] == 1
        assert r.json()["deleted_requirement"] is True

        db.expire_all()
        assert db.query(User).count() == 0
        assert db.query(Plan).count() == 0
        assert db.query(GraduationRequirement).count() == 0

        assert client.get("/auth/me", headers=auth).status_code == 401


class TestCatalog:
    def test_departments(self, client, make_department):
        make_department("MATH", "Mathematics", "Science")
        make_department("CS", "Computer Science", "Engineering")

        r = client.get("/departments")
        assert [d["code"] for d in r.json()] == ["CS", "MATH"]

        r = client.get("/departments", params={"college": "Science"})
        assert [d["code"] for d in r.json()] == ["MATH"]

    def test_department_not_found(self, client):
        assert client.get("/departments/77").status_code == 404

    def test_course_search(self, client, make_department, make_course):
        cs = make_department("CS", "Computer Science")
        make_course("CS101", 3, "major_required", cs, name="Intro to Programming")
        make_course("CS201", 3, "major_elective", cs, name="Data Structures")
        make_course("GE100", 2, "general_required", make_department("GE"), name="Writing")

        r = client.get("/courses", params={"q": "data"})
        assert [c["code"] for c in r.json()["items"]] == ["CS201"]

        r = client.get("/courses", params={"department_id": cs})
        body = r.json()
        assert body["total"] == 2
        assert body["items"][0]["department_name"] == "Computer Science"

        r = client.get("/courses", params={"category": "general_required"})
        assert [c["code"] for c in r.json()["items"]] == ["GE100"]

    def test_course_paging(self, client, make_department, make_course):
        dept = make_department("CS")
        for i in range(5):
            make_course(f"CS{100 + i}", 3, "major_elective", dept)

        r = client.get("/courses", params={"page": 2, "page_size": 2})
        body = r.json()
        assert body["total"] == 5
        assert [c["code"] for c in body["items"]] == ["CS102", "CS103"]

    def test_course_detail(self, client, make_department, make_course):
        course_id = make_course("CS101", 3, "major_required", make_department("CS"))
        r = client.get(f"/courses/{course_id}")
        assert r.status_code == 200
        assert r.json()["code"] == "CS101"
        assert client.get("/courses/9999").status_code == 404


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
