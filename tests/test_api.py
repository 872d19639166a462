"""
HTTP tests through the FastAPI app with the database dependency overridden.
Run: python -m pytest tests/test_api.py -v
"""
from decimal import Decimal

from factories import (
    ALL_HIGH_SBA,
    ALL_SKY,
    add_assessment,
    add_mark,
    add_placed_student,
    add_sba,
    add_student,
    assessment_dict,
    full_marks,
    make_bundle,
    mark_dict,
)

API = "/api/v1"


def _json_marks(*marks):
    return [{key: str(value) if isinstance(value, Decimal) else value for key, value in m.items()} for m in marks]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_generated(self, client):
        assert client.get("/health").headers["X-Request-ID"]


class TestSessionsApi:
    def test_list_sessions_and_classes(self, client, db_session):
        add_placed_student(db_session, "A", "PP1", "2024-25")
        add_placed_student(db_session, "B", "3rd", "2024-25")
        add_placed_student(db_session, "C", "3rd", "2024-25")
        db_session.commit()

        assert client.get(f"{API}/sessions").json() == ["2024-25"]
        classes = client.get(f"{API}/sessions/2024-25/classes").json()
        assert classes == [
            {"class_name": "PP1", "student_count": 1},
            {"class_name": "3rd", "student_count": 2},
        ]

    def test_promote(self, client, db_session):
        add_placed_student(db_session, "A", "PP1", "2024-25")
        add_placed_student(db_session, "B", "8th", "2024-25")
        db_session.commit()

        response = client.post(
            f"{API}/sessions/promote",
            json={"source_session": "2024-25", "target_session": "2025-26"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["promoted_count"] == 1
        assert body["graduated_count"] == 1
        assert client.get(f"{API}/sessions").json() == ["2024-25", "2025-26"]

    def test_duplicate_promotion_rejected(self, client, db_session):
        add_placed_student(db_session, "A", "PP1", "2024-25")
        db_session.commit()

        response = client.post(
            f"{API}/sessions/promote",
            json={"source_session": "2024-25", "target_session": "2024-25"},
        )
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"

    def test_blank_target_rejected(self, client, db_session):
        add_placed_student(db_session, "A", "PP1", "2024-25")
        db_session.commit()

        response = client.post(
            f"{API}/sessions/promote",
            json={"source_session": "2024-25", "target_session": "   "},
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_missing_field_uses_error_envelope(self, client):
        response = client.post(f"{API}/sessions/promote", json={"source_session": "2024-25"})
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Request validation failed"


class TestMarksApi:
    def test_consolidate(self, client):
        marks = _json_marks(mark_dict(fa1=5), mark_dict(exam_id=2, fa1=3))
        response = client.post(f"{API}/marks/consolidate", json=marks)
        assert response.status_code == 200
        english = response.json()["English"]
        assert Decimal(str(english["fa1"])) == Decimal("8")
        assert english["fa2"] is None
        assert english["exam_id"] == 0

    def test_consolidate_rejects_mixed_students(self, client):
        marks = _json_marks(mark_dict(student_id=1, fa1=5), mark_dict(student_id=2, fa1=3))
        response = client.post(f"{API}/marks/consolidate", json=marks)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_stored_consolidated_marks(self, client, db_session):
        student = add_placed_student(db_session, "A", "3rd")
        add_mark(db_session, student, "English", exam_id=1, fa1=2)
        add_mark(db_session, student, "English", exam_id=2, fa1=3)
        db_session.commit()

        response = client.get(f"{API}/marks/students/{student.id}/consolidated")
        assert Decimal(str(response.json()["English"]["fa1"])) == Decimal("5")

    def test_result_sheet(self, client, db_session):
        student = add_placed_student(db_session, "A", "3rd", roll_no="1")
        add_mark(db_session, student, "English", summative=90)
        db_session.commit()

        response = client.get(f"{API}/marks/result-sheet", params={"session": "2024-25", "class_name": "3rd"})
        assert response.status_code == 200
        body = response.json()
        assert body["class_name"] == "3rd"
        assert body["students"][0]["student_name"] == "A"

    def test_student_result(self, client, db_session):
        student = add_placed_student(db_session, "A", "3rd", roll_no="1")
        add_mark(db_session, student, "English", summative=90)
        db_session.commit()

        response = client.get(f"{API}/marks/students/{student.id}/result", params={"session": "2024-25"})
        assert response.status_code == 200
        assert response.json()["grand_max"] == 600

    def test_result_sheet_export(self, client, db_session):
        add_placed_student(db_session, "A", "3rd", roll_no="1")
        db_session.commit()

        response = client.get(
            f"{API}/marks/result-sheet/export",
            params={"session": "2024-25", "class_name": "3rd"},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "result_sheet_3rd_2024-25.xlsx" in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"


class TestProfilesApi:
    def test_aggregate_submitted_bundle(self, client):
        bundle = make_bundle(
            marks=_json_marks(full_marks()),
            sba=ALL_HIGH_SBA,
            assessments=[assessment_dict(ratings=ALL_SKY)],
        )
        response = client.post(f"{API}/profiles/aggregate", json=bundle)
        assert response.status_code == 200
        body = response.json()
        assert len(body["dimensions"]) == 9
        assert body["impressions"] == []

    def test_student_profile(self, client, db_session):
        student = add_placed_student(db_session, "A", "3rd")
        add_sba(db_session, student, **ALL_HIGH_SBA)
        db_session.commit()

        response = client.get(f"{API}/profiles/students/{student.id}", params={"session": "2024-25"})
        assert response.status_code == 200
        values = {d["label"]: d["value"] for d in response.json()["dimensions"]}
        assert values["Writing Skill"] == 90.0
        assert values["Academic Performance"] == 0.0

    def test_unplaced_student_not_found(self, client, db_session):
        student = add_student(db_session)
        db_session.commit()

        response = client.get(f"{API}/profiles/students/{student.id}", params={"session": "2024-25"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_class_profiles_degrade_malformed_records(self, client, db_session):
        good = add_placed_student(db_session, "Good", "3rd", roll_no="1")
        bad = add_placed_student(db_session, "Bad", "3rd", roll_no="2")
        add_sba(db_session, good, **ALL_HIGH_SBA)
        add_assessment(db_session, bad, cocurricular_ratings=["not", "a", "mapping"])
        db_session.commit()

        response = client.get(f"{API}/profiles/classes", params={"session": "2024-25", "class_name": "3rd"})
        assert response.status_code == 200
        profiles = response.json()
        assert [p["student_id"] for p in profiles] == [good.id, bad.id]
        assert profiles[0]["degraded"] is False
        assert profiles[1]["degraded"] is True
        assert all(d["value"] == 0 for d in profiles[1]["dimensions"])
