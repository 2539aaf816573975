from datetime import date
from types import SimpleNamespace

from models import db
from models.fee_payment import FeePayment
from routes.fees import monthly_total, total_paid


def test_record_and_list_payments(client, student, teacher_headers):
    today = date.today().isoformat()
    resp = client.post("/api/fees", json={"student_id": student.id, "amount": "1500.50", "method": "M-Pesa",
                                          "payment_date": today}, headers=teacher_headers)
    assert resp.status_code == 201

    client.post("/api/fees", json={"student_id": student.id, "amount": 500, "method": "Cash",
                                   "payment_date": "2020-01-15", "notes": "arrears"}, headers=teacher_headers)

    body = client.get("/api/fees", headers=teacher_headers).get_json()
    assert [p["method"] for p in body["data"]] == ["M-Pesa", "Cash"]
    assert body["data"][0]["student"]["name"] == "Amani Otieno"
    assert body["summary"] == {"total": 2000.5, "monthly_total": 1500.5, "count": 2}


def test_payment_validation(client, student, teacher_headers):
    assert client.post("/api/fees", json={"student_id": student.id, "amount": -5, "method": "Cash"},
                       headers=teacher_headers).status_code == 400
    assert client.post("/api/fees", json={"student_id": student.id, "amount": 10},
                       headers=teacher_headers).status_code == 400
    assert client.post("/api/fees", json={"student_id": 999, "amount": 10, "method": "Cash"},
                       headers=teacher_headers).status_code == 404


def test_totals_treat_missing_amount_as_zero():
    today = date(2026, 10, 19)
    payments = [
        SimpleNamespace(amount=None, payment_date=today),
        SimpleNamespace(amount=100.0, payment_date=today),
        SimpleNamespace(amount=50.0, payment_date=date(2026, 9, 30)),
    ]
    assert total_paid(payments) == 150.0
    assert monthly_total(payments, today=today) == 100.0


def test_parent_fee_history(client, student, parent_headers):
    db.session.add_all([
        FeePayment(student_id=student.id, amount=1000, payment_date=date(2026, 9, 1), method="Cash"),
        FeePayment(student_id=student.id, amount=None, payment_date=date(2026, 10, 1), method="Cash"),
    ])
    db.session.commit()

    body = client.get("/api/parent/fees", headers=parent_headers).get_json()
    assert body["data"][0]["payment_date"] == "2026-10-01"
    assert body["summary"] == {"total_paid": 1000, "count": 2}
