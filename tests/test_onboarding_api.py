"""
Department requirement auto-fill and the one-shot onboarding step.
"""

import pytest


@pytest.fixture
def cs_math(make_department, make_department_requirement):
    cs = make_department("CS", "Computer Science", "Engineering")
    math = make_department("MATH", "Mathematics", "Science")
    make_department_requirement(
        cs,
        general_credits=35,
        single_major_credits=66,
        single_required_min=21,
        double_major_credits=39,
        double_required_min=18,
        available_major_types=["single", "double", "minor"],
    )
    make_department_requirement(
        math,
        general_credits=30,
        single_major_credits=60,
        single_required_min=24,
        double_major_credits=36,
        double_required_min=15,
        minor_major_credits=21,
        minor_primary_major_min=42,
        available_major_types=["single", "double", "minor"],
    )
    return cs, math


def _onboard(client, auth, **body):
    payload = {"enrollmentYear": 2023}
    payload.update(body)
    return client.post("/onboarding/complete", json=payload, headers=auth)


class TestDepartmentRequirements:
    def test_primary_uses_single_column(self, client, cs_math):
        cs, _ = cs_math
        r = client.get("/department-requirements", params={"department_id": cs, "major_type": "single"})
        assert r.status_code == 200, r.text
        assert r.json() == {
            "totalCredits": 130,
            "generalCredits": 35,
            "primaryMajorCredits": 66,
            "primaryMajorRequiredMin": 21,
        }

    def test_double_uses_double_column(self, client, cs_math):
        _, math = cs_math
        r = client.get("/department-requirements", params={"department_id": math, "major_type": "double"})
        assert r.json() == {"secondaryMajorCredits": 36, "secondaryMajorRequiredMin": 15}

    def test_minor_keeps_unset_targets_as_null(self, client, cs_math):
        _, math = cs_math
        r = client.get("/department-requirements", params={"department_id": math, "major_type": "minor"})
        assert r.json() == {"minorCredits": 21, "minorRequiredMin": None, "minorPrimaryMajorMin": 42}

    def test_unknown_department(self, client):
        r = client.get("/department-requirements", params={"department_id": 404, "major_type": "single"})
        assert r.status_code == 404

    def test_invalid_major_type(self, client, cs_math):
        cs, _ = cs_math
        r = client.get("/department-requirements", params={"department_id": cs, "major_type": "triple"})
        assert r.status_code == 422

    def test_latest_year_wins(self, client, make_department, make_department_requirement):
        ee = make_department("EE")
        make_department_requirement(ee, year=2024, single_major_credits=60)
        make_department_requirement(ee, year=2025, single_major_credits=66, available_major_types=["single"])

        r = client.get("/department-requirements", params={"department_id": ee, "major_type": "single"})
        assert r.json()["primaryMajorCredits"] == 66

        row = client.get(f"/department-requirements/{ee}").json()
        assert row["year"] == 2025
        assert row["availableMajorTypes"] == ["single"]


class TestOnboarding:
    def test_fills_requirement_from_departments(self, client, auth, cs_math):
        cs, math = cs_math
        r = _onboard(client, auth, departmentId=cs, majorType="double", secondaryDepartmentId=math)
        assert r.status_code == 200, r.text
        body = r.json()

        user = body["user"]
        assert user["department_id"] == cs
        assert user["secondary_department_id"] == math
        assert user["major_type"] == "double"
        assert user["enrollment_year"] == 2023
        assert user["onboarding_completed"] is True

        req = body["graduationRequirement"]
        assert req["majorType"] == "double"
        assert req["totalCredits"] == 130
        assert req["generalCredits"] == 35
        assert req["primaryMajorCredits"] == 66
        assert req["primaryMajorRequiredMin"] == 21
        assert req["secondaryMajorCredits"] == 36
        assert req["secondaryMajorRequiredMin"] == 15
        assert req["earnedTotalCredits"] == 0

        progress = client.get("/graduation-requirements/progress", headers=auth).json()
        assert progress["secondaryMajor"]["required"] == 36

    def test_defaults_when_department_has_no_row(self, client, auth, make_department):
        art = make_department("ART")
        r = _onboard(client, auth, departmentId=art)
        assert r.status_code == 200, r.text

        req = r.json()["graduationRequirement"]
        assert req["majorType"] == "single"
        assert req["totalCredits"] == 120
        assert req["primaryMajorCredits"] == 63

    def test_explicit_requirement_follows_user_major_type(self, client, auth, cs_math):
        cs, _ = cs_math
        r = _onboard(
            client, auth,
            departmentId=cs,
            majorType="single",
            graduationRequirements={"majorType": "minor", "totalCredits": 128, "generalCredits": 30},
        )
        assert r.status_code == 200, r.text

        req = r.json()["graduationRequirement"]
        assert req["majorType"] == "single"
        assert req["totalCredits"] == 128
        assert req["primaryMajorCredits"] is None

    def test_invalid_program_changes_nothing(self, client, auth, cs_math):
        cs, _ = cs_math
        r = _onboard(client, auth, departmentId=cs, majorType="double")
        assert r.status_code == 400

        me = client.get("/users/me", headers=auth).json()
        assert me["department_id"] is None
        assert me["onboarding_completed"] is False
        assert client.get("/graduation-requirements", headers=auth).json() is None

    def test_bad_requirement_rolls_back_user(self, client, auth, cs_math):
        cs, _ = cs_math
        r = _onboard(client, auth, departmentId=cs, graduationRequirements={"primaryMajorCredits": 60})
        assert r.status_code == 400

        me = client.get("/users/me", headers=auth).json()
        assert me["department_id"] is None
        assert me["enrollment_year"] is None

    def test_enrollment_year_range(self, client, auth, cs_math):
        cs, _ = cs_math
        assert _onboard(client, auth, departmentId=cs, enrollmentYear=1999).status_code == 422

    def test_leaving_double_updates_requirement(self, client, auth, cs_math):
        cs, math = cs_math
        _onboard(client, auth, departmentId=cs, majorType="double", secondaryDepartmentId=math)

        r = client.put("/users/me", json={"major_type": "single"}, headers=auth)
        assert r.status_code == 200, r.text

        req = client.get("/graduation-requirements", headers=auth).json()
        assert req["majorType"] == "single"
        progress = client.get("/graduation-requirements/progress", headers=auth).json()
        assert "secondaryMajor" not in progress
