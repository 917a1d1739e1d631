import pytest
from fastapi import status

from app.models import Student, StudentAssignment, WeeklySchedule, WeeklyScheduleTopic, WeeklyScheduleWeek


@pytest.fixture()
def planned(teacher, student, make_lesson, make_assignment):
    math = make_lesson(teacher, topics=["M1", "M2", "M3"])
    physics = make_lesson(teacher, name="Fizik", topics=["F1"])
    assignments = {}
    for topic in list(math.topics) + list(physics.topics):
        assignments[topic.lesson_topic_name] = make_assignment(student, topic).id
    return assignments


def schedule_body(assignment_ids, start="2025-01-06", end="2025-01-20"):
    return {
        "studentId": "s1",
        "title": "Ocak Programı",
        "startDate": start,
        "endDate": end,
        "assignments": assignment_ids,
    }


def test_fourteen_days_make_two_weeks(teacher_client, planned):
    response = teacher_client.post("/api/weekly-schedules", json=schedule_body([]))
    assert response.status_code == status.HTTP_201_CREATED
    weeks = response.json()["weekPlans"]
    assert [week["weekNumber"] for week in weeks] == [1, 2]
    assert weeks[0]["startDate"].startswith("2025-01-06")
    assert weeks[0]["endDate"].startswith("2025-01-12")
    assert weeks[1]["startDate"].startswith("2025-01-13")


def test_topics_spread_round_robin_by_lesson(teacher_client, planned):
    ids = [planned[name] for name in ("M1", "M2", "M3", "F1")]
    response = teacher_client.post("/api/weekly-schedules", json=schedule_body(ids))
    assert response.status_code == status.HTTP_201_CREATED

    weeks = response.json()["weekPlans"]
    placed = [
        [(topic["topicOrder"], topic["assignment"]["topic"]["name"]) for topic in week["weekTopics"]]
        for week in weeks
    ]
    # M3 falls past the last week
    assert placed == [[(1, "M1"), (2, "F1")], [(1, "M2")]]


def test_assignments_accepted_as_objects(teacher_client, planned):
    body = schedule_body([{"id": planned["M1"]}], end="2025-01-07")
    response = teacher_client.post("/api/weekly-schedules", json=body)
    assert response.status_code == status.HTTP_201_CREATED
    weeks = response.json()["weekPlans"]
    assert len(weeks) == 1
    assert weeks[0]["weekTopics"][0]["assignmentId"] == planned["M1"]


def test_schedule_rejects_foreign_assignment(teacher_client, db_session, teacher, planned, make_lesson):
    other = Student(id="s2", name="Diğer", teacher_id=teacher.id)
    db_session.add(other)
    db_session.commit()
    lesson = make_lesson(teacher, name="Kimya", topics=["K1"])
    foreign = StudentAssignment(student_id="s2", lesson_topic_id=lesson.topics[0].id)
    db_session.add(foreign)
    db_session.commit()

    response = teacher_client.post("/api/weekly-schedules", json=schedule_body([planned["M1"], foreign.id]))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(WeeklySchedule).count() == 0
    assert db_session.query(WeeklyScheduleWeek).count() == 0


def test_schedule_requires_end_after_start(teacher_client, planned):
    response = teacher_client.post("/api/weekly-schedules", json=schedule_body([], start="2025-01-10", end="2025-01-01"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = teacher_client.post("/api/weekly-schedules", json=schedule_body([], start="01/10/2025"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["message"] == "Geçersiz tarih formatı (YYYY-MM-DD)"


def test_list_and_get_schedule(teacher_client, planned):
    created = teacher_client.post("/api/weekly-schedules", json=schedule_body([planned["M1"]])).json()

    listed = teacher_client.get("/api/weekly-schedules", params={"studentId": "s1"}).json()
    assert [schedule["id"] for schedule in listed] == [created["id"]]

    response = teacher_client.get(f"/api/weekly-schedules/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Ocak Programı"


def test_weeks_paginated(teacher_client, planned):
    created = teacher_client.post(
        "/api/weekly-schedules", json=schedule_body([planned["M1"]], end="2025-02-03")
    ).json()

    body = teacher_client.get(
        f"/api/weekly-schedules/{created['id']}/weeks",
        params={"page": 2, "limit": 2},
    ).json()
    assert [week["weekNumber"] for week in body["weeks"]] == [3, 4]
    assert "weekTopics" not in body["weeks"][0]
    assert body["pagination"] == {"page": 2, "limit": 2, "totalCount": 4, "totalPages": 2}

    body = teacher_client.get(
        f"/api/weekly-schedules/{created['id']}/weeks",
        params={"includeTopics": "true", "limit": 1},
    ).json()
    assert body["weeks"][0]["weekTopics"][0]["assignmentId"] == planned["M1"]


def test_replace_week_topics(teacher_client, db_session, planned):
    created = teacher_client.post(
        "/api/weekly-schedules", json=schedule_body([planned["M1"], planned["F1"]])
    ).json()
    week_id = created["weekPlans"][0]["id"]

    response = teacher_client.put(
        f"/api/weekly-schedules/{created['id']}/weeks/{week_id}",
        json={"weekTopics": [{"assignmentId": planned["M3"]}, {"assignmentId": planned["M1"], "isCompleted": True}]},
    )
    assert response.status_code == status.HTTP_200_OK
    topics = response.json()["weekTopics"]
    assert [(topic["topicOrder"], topic["assignmentId"]) for topic in topics] == [
        (1, planned["M3"]),
        (2, planned["M1"]),
    ]
    assert topics[1]["isCompleted"] is True
    assert db_session.query(WeeklyScheduleTopic).count() == 2


def test_update_and_delete_schedule(teacher_client, db_session, planned):
    created = teacher_client.post("/api/weekly-schedules", json=schedule_body([planned["M1"]])).json()

    response = teacher_client.put(f"/api/weekly-schedules/{created['id']}", json={"title": "Şubat", "isActive": False})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Şubat"
    assert response.json()["isActive"] is False

    response = teacher_client.delete(f"/api/weekly-schedules/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(WeeklyScheduleWeek).count() == 0
    assert db_session.query(WeeklyScheduleTopic).count() == 0


def test_week_topic_completion_stamp(teacher_client, planned):
    created = teacher_client.post("/api/weekly-schedules", json=schedule_body([planned["M1"]])).json()
    url = f"/api/weekly-schedules/{created['id']}/weeks/{created['weekPlans'][0]['id']}"

    topics = teacher_client.put(
        url,
        json={"weekTopics": [{"assignmentId": planned["M1"], "isCompleted": True}, {"assignmentId": planned["M2"]}]},
    ).json()["weekTopics"]
    stamp = topics[0]["completedAt"]
    assert stamp is not None
    assert topics[1]["completedAt"] is None

    topics = teacher_client.put(
        url,
        json={"weekTopics": [{"assignmentId": planned["M1"], "isCompleted": True}, {"assignmentId": planned["M2"]}]},
    ).json()["weekTopics"]
    assert topics[0]["completedAt"] == stamp

    topics = teacher_client.put(url, json={"weekTopics": [{"assignmentId": planned["M1"], "isCompleted": False}]}).json()[
        "weekTopics"
    ]
    assert topics[0]["isCompleted"] is False
    assert topics[0]["completedAt"] is None


def test_week_put_rejects_string_flag(teacher_client, planned):
    created = teacher_client.post("/api/weekly-schedules", json=schedule_body([planned["M1"]])).json()
    response = teacher_client.put(
        f"/api/weekly-schedules/{created['id']}/weeks/{created['weekPlans'][0]['id']}",
        json={"weekTopics": [{"assignmentId": planned["M1"], "isCompleted": "yes"}]},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "weekTopics.0.isCompleted"
