import io
import os

from conftest import fresh
from models.student import Student


def test_create_student_generates_credentials(client, teacher_headers):
    resp = client.post("/api/students", json={"name": "Brian Kamau", "class": "4A", "parent_email": "b@x.com"},
                       headers=teacher_headers)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert len(data["child_uid"]) == 8 and data["child_uid"].isupper()
    assert len(data["parent_password"]) == 8
    assert data["access_url"].endswith(f"?uid={data['child_uid']}")


def test_create_student_requires_name_and_class(client, teacher_headers):
    resp = client.post("/api/students", json={"name": "Brian Kamau"}, headers=teacher_headers)
    assert resp.status_code == 400


def test_duplicate_child_uid_is_conflict(client, student, teacher_headers):
    resp = client.post("/api/students", json={"name": "Other", "class": "4B", "child_uid": "CHILD001",
                                              "parent_password": "pw1234"}, headers=teacher_headers)
    assert resp.status_code == 409


def test_list_students_ordered_by_name(client, student, teacher_headers):
    client.post("/api/students", json={"name": "Aaron Mwangi", "class": "5B"}, headers=teacher_headers)
    data = client.get("/api/students", headers=teacher_headers).get_json()["data"]
    assert [s["name"] for s in data] == ["Aaron Mwangi", "Amani Otieno"]

    classes = client.get("/api/students/classes", headers=teacher_headers).get_json()["data"]
    assert classes == ["4A", "5B"]


def test_update_student_recomputes_access_url(client, student, teacher_headers):
    resp = client.put(f"/api/students/{student.id}", json={"child_uid": "NEWUID01", "parent_phone": "0799"},
                      headers=teacher_headers)
    assert resp.status_code == 200
    s = fresh(Student, student.id)
    assert s.child_uid == "NEWUID01"
    assert s.access_url.endswith("?uid=NEWUID01")
    assert s.parent_phone == "0799"


def test_update_unknown_student(client, teacher_headers):
    assert client.put("/api/students/999", json={"name": "X"}, headers=teacher_headers).status_code == 404


def test_generate_credentials_endpoint(client, teacher_headers):
    data = client.post("/api/students/credentials", headers=teacher_headers).get_json()["data"]
    assert set(data) == {"child_uid", "parent_password", "access_url"}


def test_photo_upload_overwrites_and_is_served(app, client, student, teacher_headers):
    for payload in (b"first", b"second"):
        resp = client.post(
            f"/api/students/{student.id}/photo",
            data={"file": (io.BytesIO(payload), "me.png", "image/png")},
            headers=teacher_headers,
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200

    s = fresh(Student, student.id)
    assert s.profile_photo_url == "CHILD001/passport-photo.png"
    stored = os.path.join(app.config["PHOTO_STORAGE_DIR"], s.profile_photo_url)
    with open(stored, "rb") as fh:
        assert fh.read() == b"second"
    assert resp.get_json()["data"]["photo_url"] == "http://testserver/photos/CHILD001/passport-photo.png"

    served = client.get("/photos/CHILD001/passport-photo.png")
    assert served.status_code == 200
    assert served.data == b"second"


def test_photo_must_be_image(client, student, teacher_headers):
    resp = client.post(
        f"/api/students/{student.id}/photo",
        data={"file": (io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf")},
        headers=teacher_headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400


def test_photo_size_limit(client, student, teacher_headers):
    big = io.BytesIO(b"x" * (2 * 1024 * 1024 + 1))
    resp = client.post(
        f"/api/students/{student.id}/photo",
        data={"file": (big, "big.jpg", "image/jpeg")},
        headers=teacher_headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert fresh(Student, student.id).profile_photo_url is None
