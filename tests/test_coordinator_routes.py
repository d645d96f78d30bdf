from datetime import datetime

from sqlalchemy import insert, update

from app.db.postgres import get_db_session
from app.db.tables import users, internships


def evaluate(client, supervisor, internship_id, rating, status="reviewed"):
    response = client.post("/api/evaluations", headers=supervisor["headers"], json={
        "internship_id": internship_id,
        "categories": [{"name": "Overall", "rating": rating, "weight": 1}],
        "feedback": f"Rated {rating}",
        "status": status,
    })
    assert response.status_code == 201, response.text
    return response.json()


def backdate(table, row_id, **values):
    with get_db_session() as db:
        db.execute(update(table).where(table.c.id == row_id).values(**values))


def test_dashboard_counts(client, make_user, create_program, coordinator, supervisor):
    s1, s2, s3, s4 = (make_user("student") for _ in range(4))
    with get_db_session() as db:
        db.execute(insert(users).values(
            email="old@example.com", password_hash="x", name="Old Student", role="student",
            created_at=datetime(2020, 1, 1)
        ))

    active = create_program([s1["id"], s2["id"]])
    create_program([s3["id"]], status="completed")
    stale = create_program([s4["id"]], status="completed")
    backdate(internships, stale["internships"][0]["id"], updated_at=datetime(2020, 1, 1))

    row_id = active["internships"][0]["id"]
    for rating in (3, 4, 5):
        evaluate(client, supervisor, row_id, rating)
    evaluate(client, supervisor, row_id, 1, status="submitted")

    response = client.get("/api/coordinators/dashboard", headers=coordinator["headers"])
    assert response.status_code == 200
    assert response.json() == {
        "total_students": 5,
        "new_students_this_semester": 4,
        "active_internships": 2,
        "placement_rate": 40,
        "completed_this_semester": 1,
        "average_rating": 4.0,
    }


def test_dashboard_empty(client, coordinator):
    response = client.get("/api/coordinators/dashboard", headers=coordinator["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["total_students"] == 0
    assert body["placement_rate"] == 0
    assert body["average_rating"] is None


def test_coordinator_views_require_coordinator(client, make_user, supervisor):
    student = make_user("student")
    for url in ("/api/coordinators/dashboard", "/api/coordinators/analytics", "/api/coordinators/students"):
        assert client.get(url, headers=student["headers"]).status_code == 403
        assert client.get(url, headers=supervisor["headers"]).status_code == 403


def test_admin_sees_dashboard(client, make_user):
    admin = make_user("admin")
    assert client.get("/api/coordinators/dashboard", headers=admin["headers"]).status_code == 200


def test_analytics(client, make_user, create_program, coordinator, supervisor):
    s1, s2, s3, s4 = (make_user("student") for _ in range(4))
    tech = create_program([s1["id"], s2["id"]])
    create_program([s3["id"]], company="Data Inc", status="pending")
    create_program([s4["id"]], status="completed")

    row_id = tech["internships"][0]["id"]
    evaluate(client, supervisor, row_id, 4)
    evaluate(client, supervisor, row_id, 2, status="submitted")

    response = client.get("/api/coordinators/analytics", headers=coordinator["headers"])
    assert response.status_code == 200
    body = response.json()

    now = datetime.utcnow()
    semester = f"{'Spring' if now.month <= 6 else 'Fall'} {now.year}"
    assert body["internship_growth"] == [{"semester": semester, "internships": 4}]
    assert body["placement_success_rate"] == 75
    assert body["evaluation_completion_rate"] == 50
    assert body["placements_per_company"] == [
        {"company": "Tech Corp", "placements": 3},
        {"company": "Data Inc", "placements": 1},
    ]
    assert body["evaluation_scores_by_company"] == [
        {"company": "Tech Corp", "average_score": 4.0, "evaluation_count": 1},
    ]
    assert body["active_vs_completed"] == {"active": 2, "completed": 1}


def test_student_list(client, make_user, create_program, coordinator):
    placed = make_user("student", name="Alice", phone="555-0199")
    finished = make_user("student", name="Bob")
    waiting = make_user("student", name="Cara")
    unplaced = make_user("student", name="Dan")
    create_program([placed["id"]], company="Tech Corp")
    create_program([finished["id"]], status="completed")
    create_program([waiting["id"]], status="pending")

    response = client.get("/api/coordinators/students", headers=coordinator["headers"])
    assert response.status_code == 200
    students = {s["name"]: s for s in response.json()}
    assert list(students) == ["Alice", "Bob", "Cara", "Dan"]

    assert students["Alice"] == {
        "id": placed["id"], "name": "Alice", "email": placed["email"], "phone": "555-0199",
        "internship": "Tech Corp", "status": "active", "start_date": "2025-01-15",
    }
    assert (students["Bob"]["status"], students["Bob"]["internship"]) == ("completed", None)
    assert students["Cara"]["status"] == "pending"
    assert students["Dan"]["status"] == "pending"
    assert students["Dan"]["phone"] == "Not provided"
    assert students["Dan"]["id"] == unplaced["id"]


def test_student_detail(client, make_user, create_program, coordinator, supervisor):
    student = make_user("student", name="Alice")
    body = create_program([student["id"]])
    row_id = body["internships"][0]["id"]

    evaluate(client, supervisor, row_id, 3, status="draft")
    created = [evaluate(client, supervisor, row_id, rating) for rating in (4, 5, 2)]

    response = client.get(f"/api/coordinators/students/{student['id']}", headers=coordinator["headers"])
    assert response.status_code == 200
    detail = response.json()

    assert detail["student"]["name"] == "Alice"
    assert detail["student"]["phone"] == ""
    assert detail["internship"]["id"] == row_id
    assert detail["internship"]["company_name"] == "Tech Corp"
    assert detail["internship"]["supervisor_name"] == supervisor["name"]
    assert detail["internship"]["department"] == "Engineering"
    assert detail["total_evaluations"] == 4
    assert [e["id"] for e in detail["evaluations"]] == [e["id"] for e in reversed(created)]
    assert detail["evaluations"][0]["overall_rating"] == 2.0


def test_student_detail_without_internship(client, make_user, coordinator):
    student = make_user("student")
    response = client.get(f"/api/coordinators/students/{student['id']}", headers=coordinator["headers"])
    assert response.status_code == 200
    assert response.json()["internship"] is None
    assert response.json()["evaluations"] == []


def test_student_detail_not_found(client, coordinator, supervisor):
    assert client.get("/api/coordinators/students/999", headers=coordinator["headers"]).status_code == 404
    # a supervisor account is not a student
    response = client.get(f"/api/coordinators/students/{supervisor['id']}", headers=coordinator["headers"])
    assert response.status_code == 404
