from fastapi import status

from app.models import COLOR_PALETTE, Lesson, LessonColor, LessonTopic


def test_create_lesson_gets_first_color(teacher_client):
    response = teacher_client.post(
        "/api/lessons",
        json={"name": "Matematik", "group": "9. Sınıf", "type": "TYT"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Matematik"
    assert data["group"] == "9. Sınıf"
    assert data["type"] == "TYT"
    assert data["color"] == "blue"
    assert data["subject"] is None


def test_auto_colors_are_distinct_until_palette_runs_out(teacher_client):
    colors = []
    for index in range(len(COLOR_PALETTE) + 1):
        response = teacher_client.post("/api/lessons", json={"name": f"Ders {index}", "group": "10"})
        assert response.status_code == status.HTTP_201_CREATED
        colors.append(response.json()["color"])

    assert colors[: len(COLOR_PALETTE)] == list(COLOR_PALETTE)
    assert colors[-1] == "blue"


def test_explicit_color_is_kept(teacher_client):
    response = teacher_client.post(
        "/api/lessons",
        json={"name": "Fizik", "group": "11", "type": "AYT", "color": "red"},
    )
    assert response.json()["color"] == "red"
    assert response.json()["type"] == "AYT"


def test_create_lesson_validation(teacher_client, db_session):
    response = teacher_client.post("/api/lessons", json={"name": "M", "group": "9"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Doğrulama hatası"
    assert {"field": "name", "message": "En az 2 karakter olmalıdır"} in body["details"]
    assert db_session.query(Lesson).count() == 0


def test_list_lessons_only_own(teacher_client, teacher, other_teacher, make_lesson):
    make_lesson(teacher, name="Matematik")
    make_lesson(teacher, name="Kimya", lesson_exam_type="AYT")
    make_lesson(other_teacher, name="Biyoloji")

    names = {lesson["name"] for lesson in teacher_client.get("/api/lessons").json()}
    assert names == {"Matematik", "Kimya"}

    ayt = teacher_client.get("/api/lessons", params={"type": "AYT"}).json()
    assert [lesson["name"] for lesson in ayt] == ["Kimya"]


def test_admin_lists_all_lessons_with_teacher(admin_client, teacher, other_teacher, make_lesson):
    make_lesson(teacher, name="Matematik")
    make_lesson(other_teacher, name="Biyoloji")

    data = admin_client.get("/api/lessons").json()
    assert len(data) == 2
    by_name = {lesson["name"]: lesson for lesson in data}
    assert by_name["Biyoloji"]["teacher"] == {"name": other_teacher.name, "email": other_teacher.email}


def test_get_lesson_with_ordered_topics(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar", "Kümeler", "Fonksiyonlar"])
    response = teacher_client.get(f"/api/lessons/{lesson.id}")
    assert response.status_code == status.HTTP_200_OK
    topics = response.json()["topics"]
    assert [topic["name"] for topic in topics] == ["Sayılar", "Kümeler", "Fonksiyonlar"]
    assert [topic["order"] for topic in topics] == [1, 2, 3]


def test_lesson_ownership(teacher_client, other_teacher, make_lesson):
    lesson = make_lesson(other_teacher)
    response = teacher_client.get(f"/api/lessons/{lesson.id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"] == "Bu derse erişim izniniz yok"

    assert teacher_client.get("/api/lessons/missing").status_code == status.HTTP_404_NOT_FOUND


def test_update_lesson_partial(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, lesson_subject="Cebir")
    response = teacher_client.put(f"/api/lessons/{lesson.id}", json={"group": "12. Sınıf", "subject": ""})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["group"] == "12. Sınıf"
    assert data["name"] == "Matematik"
    assert data["subject"] is None


def test_delete_lesson_cascades_topics(teacher_client, db_session, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar", "Kümeler"])
    response = teacher_client.delete(f"/api/lessons/{lesson.id}")
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Lesson).count() == 0
    assert db_session.query(LessonTopic).count() == 0


def test_assign_colors_round_robin(teacher_client, db_session, teacher, make_lesson):
    for index in range(3):
        make_lesson(teacher, name=f"Ders {index}", color=LessonColor.gray)

    response = teacher_client.post("/api/lessons/assign-colors")
    assert response.status_code == status.HTTP_200_OK
    colors = [lesson["color"] for lesson in response.json()["lessons"]]
    assert colors == ["blue", "purple", "green"]
