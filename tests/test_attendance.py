from datetime import date, timedelta
from types import SimpleNamespace

from models.attendance import Attendance
from models.student import Student
from models import db
from routes.attendance import history_stats


def _other_student():
    s = Student(name="Brian Kamau", class_name="5B", child_uid="CHILD002", parent_password="pw")
    db.session.add(s)
    db.session.commit()
    return s


def test_marking_twice_updates_single_row(client, student, teacher_headers):
    body = {"student_id": student.id, "date": "2026-10-19", "status": "Present"}
    assert client.post("/api/attendance", json=body, headers=teacher_headers).status_code == 201

    body["status"] = "absent"
    resp = client.post("/api/attendance", json=body, headers=teacher_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "Absent"

    db.session.expire_all()
    assert Attendance.query.filter_by(student_id=student.id).count() == 1


def test_daily_register_stats_and_class_filter(client, student, teacher_headers):
    other = _other_student()
    client.post("/api/attendance", json={"student_id": student.id, "date": "2026-10-19", "status": "Present"},
                headers=teacher_headers)

    body = client.get("/api/attendance?date=2026-10-19", headers=teacher_headers).get_json()
    assert body["stats"] == {"total": 2, "present": 1, "absent": 0, "unmarked": 1}
    by_id = {row["student_id"]: row for row in body["data"]}
    assert by_id[student.id]["attendance"]["status"] == "Present"
    assert by_id[other.id]["attendance"] is None

    body = client.get("/api/attendance?date=2026-10-19&class=5B", headers=teacher_headers).get_json()
    assert [row["student_id"] for row in body["data"]] == [other.id]


def test_invalid_status_and_unknown_student(client, student, teacher_headers):
    resp = client.post("/api/attendance", json={"student_id": student.id, "status": "Late"}, headers=teacher_headers)
    assert resp.status_code == 400
    resp = client.post("/api/attendance", json={"student_id": 999, "status": "Present"}, headers=teacher_headers)
    assert resp.status_code == 404


def test_history_stats_percentage():
    rows = [SimpleNamespace(status=s) for s in ["Present", "Present", "Absent", "Present"]]
    assert history_stats(rows) == {"total_days": 4, "present_days": 3, "absent_days": 1, "percentage": 75.0}
    assert history_stats([])["percentage"] == 0


def test_parent_sees_last_30_days(client, student, parent_headers):
    today = date.today()
    for i in range(35):
        db.session.add(Attendance(student_id=student.id, date=today - timedelta(days=i),
                                  status="Absent" if i % 5 == 0 else "Present"))
    db.session.commit()

    body = client.get("/api/parent/attendance", headers=parent_headers).get_json()
    assert len(body["data"]) == 30
    assert body["data"][0]["date"] == today.isoformat()
    assert body["stats"]["total_days"] == 30
    assert body["stats"]["absent_days"] == 6
    assert body["stats"]["percentage"] == 80.0
