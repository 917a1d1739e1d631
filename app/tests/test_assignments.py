from fastapi import status

from app.models import StudentAssignment


def assigned_topic_ids(db_session, student_id):
    return {
        topic_id
        for (topic_id,) in db_session.query(StudentAssignment.lesson_topic_id).filter(
            StudentAssignment.student_id == student_id
        )
    }


def test_assign_empty_list(teacher_client, student):
    response = teacher_client.post("/api/student-assignments", json={"studentId": "s1", "topicIds": []})
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["assignments"] == 0
    assert data["totalAssignments"] == 0
    assert data["studentId"] == "s1"
    assert data["results"] == []


def test_assign_replaces_previous_set(teacher_client, db_session, student, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A", "B", "C"])
    a, b, c = [topic.id for topic in lesson.topics]

    first = teacher_client.post("/api/student-assignments", json={"studentId": "s1", "topicIds": [a, b]})
    assert first.json()["assignments"] == 2

    second = teacher_client.post("/api/student-assignments", json={"studentId": "s1", "topicIds": [b, c]})
    assert second.status_code == status.HTTP_201_CREATED
    assert second.json()["totalAssignments"] == 2
    assert assigned_topic_ids(db_session, "s1") == {b, c}


def test_assign_reports_failures_per_topic(teacher_client, db_session, student, teacher, other_teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A"])
    foreign = make_lesson(other_teacher, name="Fizik", topics=["X"])
    a = lesson.topics[0].id
    x = foreign.topics[0].id

    response = teacher_client.post(
        "/api/student-assignments",
        json={"studentId": "s1", "topicIds": [a, "missing", x, a]},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["assignments"] == 1
    assert data["totalAssignments"] == 1
    assert [result["success"] for result in data["results"]] == [True, False, False, False]
    assert data["results"][1]["error"] == "Konu bulunamadı"
    assert assigned_topic_ids(db_session, "s1") == {a}


def test_assign_keeps_question_counts_for_topic(teacher_client, db_session, student, teacher, make_lesson):
    lesson = make_lesson(teacher, topics=["A", "B"])
    a, b = [topic.id for topic in lesson.topics]

    teacher_client.post(
        "/api/student-assignments",
        json={"studentId": "s1", "topicIds": [a], "questionCounts": {"r1": {a: 10, b: 4}}},
    )
    assignment = db_session.query(StudentAssignment).one()
    assert assignment.question_counts == {"r1": {a: 10}}


def test_assign_to_foreign_student(make_client, other_teacher, student):
    client = make_client(user=other_teacher)
    response = client.post("/api/student-assignments", json={"studentId": "s1", "topicIds": []})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_assignments(teacher_client, student, teacher, make_lesson, make_assignment):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    make_assignment(student, lesson.topics[0])

    data = teacher_client.get("/api/student-assignments", params={"studentId": "s1"}).json()
    assert len(data) == 1
    assert data[0]["topicId"] == lesson.topics[0].id
    assert data[0]["topic"]["lesson"]["id"] == lesson.id


def test_complete_assignment(teacher_client, student, teacher, make_lesson, make_assignment):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    assignment = make_assignment(student, lesson.topics[0])

    response = teacher_client.put(f"/api/student-assignments/{assignment.id}", json={"completed": True})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["completed"] is True
    assert response.json()["completedAt"] is not None

    response = teacher_client.put(f"/api/student-assignments/{assignment.id}", json={"completed": False})
    assert response.json()["completedAt"] is None


def test_update_rejects_loose_values(teacher_client, student, teacher, make_lesson, make_assignment):
    lesson = make_lesson(teacher, topics=["Sayılar"])
    assignment = make_assignment(student, lesson.topics[0])

    response = teacher_client.put(f"/api/student-assignments/{assignment.id}", json={"completed": "yes"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"] == [{"field": "completed", "message": "Doğru/yanlış değeri olmalıdır"}]

    response = teacher_client.put(
        f"/api/student-assignments/{assignment.id}",
        json={"questionCounts": {"r1": {"t1": "12"}}},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "questionCounts.r1.t1"
