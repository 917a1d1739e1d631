from datetime import datetime, timedelta

from fastapi import status

from app.core.security import verify_password
from app.models import Lesson, Student, User


def test_create_teacher(admin_client, db_session):
    response = admin_client.post(
        "/api/teachers",
        json={
            "name": "Fatma Çelik",
            "email": "fatma@example.com",
            "password": "sifre123",
            "subscriptionEndDate": "2030-01-01",
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["role"] == "TEACHER"
    assert data["isSubscriptionActive"] is True
    assert data["subscriptionEndDate"].startswith("2030-01-01")

    teacher = db_session.query(User).filter(User.email == "fatma@example.com").one()
    assert verify_password("sifre123", teacher.password)


def test_create_teacher_duplicate_email(admin_client, teacher):
    response = admin_client.post(
        "/api/teachers",
        json={"name": "Kopya", "email": teacher.email, "password": "sifre123"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_teacher_routes_require_super_admin(teacher_client):
    response = teacher_client.get("/api/teachers")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_teachers_with_counts(admin_client, db_session, teacher, other_teacher, make_lesson):
    make_lesson(teacher)
    db_session.add_all([Student(name="Öğrenci 1", teacher_id=teacher.id), Student(name="Öğrenci 2", teacher_id=teacher.id)])
    db_session.commit()

    body = admin_client.get("/api/teachers").json()
    assert body["total"] == 2
    assert [item["name"] for item in body["teachers"]] == ["Ayşe Yılmaz", "Mehmet Demir"]
    assert body["teachers"][0]["_count"] == {"students": 2, "lessons": 1, "resources": 0}
    assert body["teachers"][1]["_count"] == {"students": 0, "lessons": 0, "resources": 0}


def test_update_teacher(admin_client, db_session, teacher, other_teacher):
    expired = (datetime.utcnow() - timedelta(days=3)).isoformat()
    response = admin_client.put(
        f"/api/teachers/{teacher.id}",
        json={"name": "Ayşe Kaya", "subscriptionEndDate": expired, "password": "yenisifre"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Ayşe Kaya"
    assert data["isSubscriptionActive"] is False
    db_session.refresh(teacher)
    assert verify_password("yenisifre", teacher.password)

    response = admin_client.put(f"/api/teachers/{teacher.id}", json={"email": other_teacher.email})
    assert response.status_code == status.HTTP_409_CONFLICT


def test_delete_teacher_cascades(admin_client, db_session, teacher, make_lesson):
    make_lesson(teacher, topics=["Sayılar"])
    db_session.add(Student(name="Öğrenci", teacher_id=teacher.id))
    db_session.commit()

    response = admin_client.delete(f"/api/teachers/{teacher.id}")
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Lesson).count() == 0
    assert db_session.query(Student).count() == 0


def test_admin_cannot_delete_self(admin_client, admin):
    response = admin_client.delete(f"/api/teachers/{admin.id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN
