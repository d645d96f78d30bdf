from datetime import date, timedelta

import pytest

from app.services import attendance_service

CATEGORIES = [
    {"name": "Technical Skills", "rating": 5, "weight": 0.15, "comments": "Strong coding ability"},
    {"name": "Communication", "rating": 4, "weight": 0.2},
    {"name": "Problem Solving", "rating": 3, "weight": 0.25},
    {"name": "Team Work", "rating": 5, "weight": 0.15},
    {"name": "Reliability", "rating": 4, "weight": 0.15},
    {"name": "Initiative", "rating": 2, "weight": 0.1},
]


@pytest.fixture
def intern(make_user, create_program):
    student = make_user("student", name="Alice")
    body = create_program([student["id"]])
    return {"student": student, "internship_id": body["internships"][0]["id"]}


def evaluate(client, supervisor, internship_id, categories=CATEGORIES, **extra):
    payload = {"internship_id": internship_id, "categories": categories, "feedback": "Great work"}
    payload.update(extra)
    return client.post("/api/evaluations", headers=supervisor["headers"], json=payload)


def test_create_computes_overall_rating(client, supervisor, intern):
    # client-side overall_rating is ignored
    response = evaluate(client, supervisor, intern["internship_id"], overall_rating=1)
    assert response.status_code == 201
    body = response.json()
    assert body["overall_rating"] == 3.9
    assert body["status"] == "submitted"
    assert body["student_id"] == intern["student"]["id"]
    assert body["student_name"] == "Alice"
    assert body["company"] == "Tech Corp"
    assert body["evaluation_code"].startswith("EVAL-")
    assert [c["name"] for c in body["categories"]] == [c["name"] for c in CATEGORIES]
    assert body["categories"][0]["comments"] == "Strong coding ability"


def test_create_zero_weights_scores_zero(client, supervisor, intern):
    response = evaluate(client, supervisor, intern["internship_id"], categories=[
        {"name": "A", "rating": 5, "weight": 0},
        {"name": "B", "rating": 3, "weight": 0},
    ])
    assert response.status_code == 201
    assert response.json()["overall_rating"] == 0


def test_only_own_interns(client, make_user, intern):
    stranger = make_user("supervisor", name="Other Person")
    response = evaluate(client, stranger, intern["internship_id"])
    assert response.status_code == 403


def test_internship_must_exist(client, supervisor):
    assert evaluate(client, supervisor, 999).status_code == 404


@pytest.mark.parametrize("categories", [
    [],
    [{"name": "A", "rating": 6, "weight": 0.5}],
    [{"name": "A", "rating": 0, "weight": 0.5}],
    [{"name": "A", "rating": 3, "weight": -0.1}],
    [{"name": "A", "rating": 3, "weight": 0.5}, {"name": "A", "rating": 4, "weight": 0.5}],
])
def test_invalid_categories_rejected(client, supervisor, intern, categories):
    response = evaluate(client, supervisor, intern["internship_id"], categories=categories)
    assert response.status_code == 422


def test_update_recomputes_rating(client, supervisor, intern):
    evaluation_id = evaluate(client, supervisor, intern["internship_id"]).json()["id"]

    response = client.put(f"/api/evaluations/{evaluation_id}", headers=supervisor["headers"], json={
        "categories": [{"name": "Overall", "rating": 5, "weight": 0.9}, {"name": "Docs", "rating": 1, "weight": 0.1}],
        "feedback": "Revised",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["overall_rating"] == 4.6
    assert body["feedback"] == "Revised"

    response = client.get(f"/api/evaluations/{evaluation_id}", headers=supervisor["headers"])
    assert response.json()["overall_rating"] == 4.6


def test_update_requires_fields(client, supervisor, intern):
    evaluation_id = evaluate(client, supervisor, intern["internship_id"]).json()["id"]
    response = client.put(f"/api/evaluations/{evaluation_id}", headers=supervisor["headers"], json={})
    assert response.status_code == 400


def test_detail_owner_only(client, make_user, supervisor, intern):
    evaluation_id = evaluate(client, supervisor, intern["internship_id"]).json()["id"]
    stranger = make_user("supervisor", name="Other Person")

    assert client.get(f"/api/evaluations/{evaluation_id}", headers=stranger["headers"]).status_code == 403
    assert client.get("/api/evaluations/12345", headers=supervisor["headers"]).status_code == 404


def test_supervisor_list_hides_draft_rating(client, supervisor, intern):
    evaluate(client, supervisor, intern["internship_id"], status="draft")
    evaluate(client, supervisor, intern["internship_id"])

    response = client.get("/api/evaluations", headers=supervisor["headers"])
    assert response.status_code == 200
    ratings = sorted((e["status"], e["rating"]) for e in response.json())
    assert ratings == [("draft", None), ("submitted", 3.9)]


def test_student_sees_only_submitted_details(client, supervisor, intern):
    evaluate(client, supervisor, intern["internship_id"], status="draft")
    evaluate(client, supervisor, intern["internship_id"])

    response = client.get("/api/students/evaluations", headers=intern["student"]["headers"])
    assert response.status_code == 200
    items = {e["status"]: e for e in response.json()}
    assert items["draft"]["overall_rating"] is None
    assert items["draft"]["categories"] == []
    assert items["draft"]["comments"] == ""
    assert items["submitted"]["overall_rating"] == 3.9
    assert items["submitted"]["evaluator"] == supervisor["name"]
    assert items["submitted"]["categories"][0] == {"name": "Technical Skills", "rating": 5}


def test_interns_show_latest_rating(client, supervisor, intern):
    response = client.get("/api/supervisors/interns", headers=supervisor["headers"])
    assert response.json()[0]["performance_rating"] is None

    evaluate(client, supervisor, intern["internship_id"])
    response = client.get("/api/supervisors/interns", headers=supervisor["headers"])
    interns = response.json()
    assert len(interns) == 1
    assert interns[0]["name"] == "Alice"
    assert interns[0]["performance_rating"] == 3.9


def test_attendance_marking_and_student_summary(client, supervisor, intern):
    today = date.today()
    marks = [(1, "present"), (2, "present"), (3, "absent"), (4, "leave"), (5, "holiday")]
    for offset, status in marks:
        response = client.post("/api/supervisors/attendance", headers=supervisor["headers"], json={
            "internship_id": intern["internship_id"],
            "date": (today - timedelta(days=offset)).isoformat(),
            "status": status,
            "check_in_time": "09:00",
        })
        assert response.status_code == 201

    duplicate = client.post("/api/supervisors/attendance", headers=supervisor["headers"], json={
        "internship_id": intern["internship_id"],
        "date": (today - timedelta(days=1)).isoformat(),
        "status": "absent",
    })
    assert duplicate.status_code == 400

    response = client.get("/api/students/attendance", headers=intern["student"]["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["attendance_summary"] == {"present": 2, "absent": 1, "leave": 1}
    assert body["attendance_percentage"] == 50.0
    assert len(body["weekly_attendance"]) == 6
    assert body["weekly_attendance"][-1] == {"week": "Week 6", "present": 2, "absent": 1, "leave": 1}


def test_attendance_without_active_internship(client, make_user):
    student = make_user("student")
    response = client.get("/api/students/attendance", headers=student["headers"])
    assert response.status_code == 200
    assert response.json() == {
        "attendance_summary": {"present": 0, "absent": 0, "leave": 0},
        "weekly_attendance": [],
        "attendance_percentage": 0,
    }


def test_attendance_only_for_own_interns(client, make_user, intern):
    stranger = make_user("supervisor", name="Other Person")
    response = client.post("/api/supervisors/attendance", headers=stranger["headers"], json={
        "internship_id": intern["internship_id"], "date": "2025-02-10", "status": "present",
    })
    assert response.status_code == 403


def test_student_internships(client, intern):
    response = client.get("/api/students/internships", headers=intern["student"]["headers"])
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [intern["internship_id"]]


def test_concurrent_attendance_mark_reports_duplicate(client, supervisor, intern, monkeypatch):
    payload = {"internship_id": intern["internship_id"], "date": "2025-02-10", "status": "present"}
    assert client.post("/api/supervisors/attendance", headers=supervisor["headers"], json=payload).status_code == 201

    # the other request's row lands between our duplicate check and our insert
    monkeypatch.setattr(attendance_service, "find_record", lambda *args: None)
    response = client.post("/api/supervisors/attendance", headers=supervisor["headers"], json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Attendance already marked for this date"


def test_intern_evaluation_history(client, supervisor, intern):
    evaluate(client, supervisor, intern["internship_id"], status="draft")
    first = evaluate(client, supervisor, intern["internship_id"]).json()
    second = evaluate(client, supervisor, intern["internship_id"], status="reviewed", feedback="Reviewed").json()

    response = client.get(
        f"/api/supervisors/interns/{intern['internship_id']}/evaluations", headers=supervisor["headers"]
    )
    assert response.status_code == 200
    history = response.json()
    assert [e["id"] for e in history] == [second["id"], first["id"]]
    assert history[0]["status"] == "reviewed"
    assert history[0]["feedback"] == "Reviewed"
    assert history[1]["overall_rating"] == 3.9
    assert len(history[1]["categories"]) == len(CATEGORIES)


def test_intern_evaluation_history_owner_only(client, make_user, supervisor, intern):
    stranger = make_user("supervisor", name="Other Person")
    url = f"/api/supervisors/interns/{intern['internship_id']}/evaluations"

    assert client.get(url, headers=stranger["headers"]).status_code == 403
    assert client.get("/api/supervisors/interns/999/evaluations", headers=supervisor["headers"]).status_code == 404
    assert client.get(url, headers=intern["student"]["headers"]).status_code == 403
