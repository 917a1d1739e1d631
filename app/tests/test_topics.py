from fastapi import status

from app.models import LessonTopic


def topic_orders(client, lesson_id):
    topics = client.get("/api/topics", params={"lessonId": lesson_id}).json()
    return [(topic["name"], topic["order"]) for topic in topics]


def test_create_topic_appends_order(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher)
    for name in ("Sayılar", "Kümeler"):
        response = teacher_client.post("/api/topics", json={"name": name, "lessonId": lesson.id})
        assert response.status_code == status.HTTP_201_CREATED

    assert topic_orders(teacher_client, lesson.id) == [("Sayılar", 1), ("Kümeler", 2)]


def test_create_topic_in_foreign_lesson(teacher_client, other_teacher, make_lesson):
    lesson = make_lesson(other_teacher)
    response = teacher_client.post("/api/topics", json={"name": "Sayılar", "lessonId": lesson.id})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_reorder_topics(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A", "B", "C"])
    ids = {topic.lesson_topic_name: topic.id for topic in lesson.topics}

    response = teacher_client.put(
        "/api/topics/reorder",
        json={"lessonId": lesson.id, "topicIds": [ids["C"], ids["A"], ids["B"]]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert topic_orders(teacher_client, lesson.id) == [("C", 1), ("A", 2), ("B", 3)]


def test_reorder_rejects_foreign_and_duplicate_ids(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A", "B"])
    other = make_lesson(teacher, name="Fizik", topics=["X"])
    a, b = [topic.id for topic in lesson.topics]

    response = teacher_client.put(
        "/api/topics/reorder",
        json={"lessonId": lesson.id, "topicIds": [b, other.topics[0].id]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = teacher_client.put("/api/topics/reorder", json={"lessonId": lesson.id, "topicIds": [a, a]})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    assert topic_orders(teacher_client, lesson.id) == [("A", 1), ("B", 2)]


def test_reorder_validation_and_missing_lesson(teacher_client):
    response = teacher_client.put("/api/topics/reorder", json={"lessonId": "x", "topicIds": []})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "topicIds"

    response = teacher_client.put("/api/topics/reorder", json={"lessonId": "missing", "topicIds": ["t1"]})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_topic_densifies_orders(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A", "B", "C"])
    middle = next(topic for topic in lesson.topics if topic.lesson_topic_name == "B")

    response = teacher_client.delete(f"/api/topics/{middle.id}")
    assert response.status_code == status.HTTP_200_OK
    assert topic_orders(teacher_client, lesson.id) == [("A", 1), ("C", 2)]


def test_update_topic(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    response = teacher_client.put(f"/api/topics/{lesson.topics[0].id}", json={"name": "Doğal Sayılar"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Doğal Sayılar"
    assert response.json()["order"] == 1


def test_list_topics_with_question_counts(teacher_client, teacher, make_lesson, make_resource):
    lesson = make_lesson(teacher, topics=["A", "B"])
    a, b = lesson.topics
    make_resource(teacher, lesson, {a.id: 20}, name="Kitap 1")
    make_resource(teacher, lesson, {a.id: 15, b.id: 5}, name="Kitap 2")

    topics = teacher_client.get("/api/topics", params={"lessonId": lesson.id}).json()
    assert {topic["name"]: topic["questionCount"] for topic in topics} == {"A": 35, "B": 5}


def test_fix_orders(teacher_client, db_session, teacher, make_lesson):
    lesson = make_lesson(teacher)
    for name, order in (("A", 2), ("B", 5), ("C", 9)):
        db_session.add(LessonTopic(lesson_topic_name=name, lesson_topic_order=order, lesson_id=lesson.id))
    db_session.commit()

    response = teacher_client.post("/api/topics/fix-orders")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "lessons": 1, "updatedTopics": 3}
    assert topic_orders(teacher_client, lesson.id) == [("A", 1), ("B", 2), ("C", 3)]
