from fastapi import status

from app.models import Resource, ResourceLesson, ResourceTopic


def resource_payload(lesson, counts, name="345 Soru Bankası"):
    return {
        "name": name,
        "description": "TYT matematik",
        "lessons": [
            {
                "lessonId": lesson.id,
                "topics": [{"topicId": topic_id, "questionCount": count} for topic_id, count in counts.items()],
            }
        ],
    }


def test_create_resource_with_topics(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar", "Kümeler"])
    a, b = lesson.topics

    response = teacher_client.post("/api/resources", json=resource_payload(lesson, {a.id: 40, b.id: 25}))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "345 Soru Bankası"
    assert data["teacherId"] == teacher.id
    assert len(data["lessons"]) == 1
    topics = data["lessons"][0]["topics"]
    assert [(topic["name"], topic["questionCount"]) for topic in topics] == [("Sayılar", 40), ("Kümeler", 25)]


def test_create_resource_rejects_topic_of_other_lesson(teacher_client, db_session, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    other = make_lesson(teacher, name="Fizik", topics=["Kuvvet"])

    response = teacher_client.post("/api/resources", json=resource_payload(lesson, {other.topics[0].id: 10}))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(Resource).count() == 0
    assert db_session.query(ResourceTopic).count() == 0


def test_create_resource_rejects_foreign_lesson(teacher_client, db_session, other_teacher, make_lesson):
    lesson = make_lesson(other_teacher, topics=["Sayılar"])

    response = teacher_client.post("/api/resources", json=resource_payload(lesson, {lesson.topics[0].id: 10}))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(Resource).count() == 0


def test_update_resource_replaces_links(teacher_client, db_session, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar", "Kümeler"])
    a, b = lesson.topics
    created = teacher_client.post("/api/resources", json=resource_payload(lesson, {a.id: 40})).json()

    response = teacher_client.put(
        f"/api/resources/{created['id']}",
        json={"name": "Yeni Ad", "lessons": [{"lessonId": lesson.id, "topics": [{"topicId": b.id, "questionCount": 7}]}]},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Yeni Ad"
    assert [(topic["name"], topic["questionCount"]) for topic in data["lessons"][0]["topics"]] == [("Kümeler", 7)]
    assert db_session.query(ResourceLesson).count() == 1
    assert db_session.query(ResourceTopic).count() == 1


def test_update_resource_keeps_links_when_lessons_omitted(teacher_client, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    created = teacher_client.post(
        "/api/resources", json=resource_payload(lesson, {lesson.topics[0].id: 12})
    ).json()

    response = teacher_client.put(f"/api/resources/{created['id']}", json={"description": ""})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["description"] is None
    assert data["lessons"][0]["topics"][0]["questionCount"] == 12


def test_list_resources_paginated(teacher_client, teacher, other_teacher, make_lesson, make_resource):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    foreign = make_lesson(other_teacher, topics=["Kuvvet"])
    make_resource(teacher, lesson, {lesson.topics[0].id: 3}, name="Kitap 1")
    make_resource(teacher, lesson, {}, name="Kitap 2")
    make_resource(other_teacher, foreign, {}, name="Başkasının")

    body = teacher_client.get("/api/resources", params={"limit": 1}).json()
    assert len(body["data"]) == 1
    assert body["pagination"]["totalCount"] == 2
    assert body["pagination"]["totalPages"] == 2


def test_delete_resource(teacher_client, db_session, teacher, make_lesson, make_resource):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    resource = make_resource(teacher, lesson, {lesson.topics[0].id: 3})

    response = teacher_client.delete(f"/api/resources/{resource.id}")
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Resource).count() == 0
    assert db_session.query(ResourceTopic).count() == 0


def test_resource_of_other_teacher(teacher_client, other_teacher, make_lesson, make_resource):
    lesson = make_lesson(other_teacher, topics=["Kuvvet"])
    resource = make_resource(other_teacher, lesson, {})
    assert teacher_client.get(f"/api/resources/{resource.id}").status_code == status.HTTP_403_FORBIDDEN
