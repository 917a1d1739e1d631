from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db
from app.core.config import get_settings
from app.core.rate_limit import clear_rate_limit_store
from app.core.security import create_access_token, create_student_token, hash_password
from app.db.base import Base
from app.db.session import build_engine
from app.models import (
    Lesson,
    LessonTopic,
    Resource,
    ResourceLesson,
    ResourceTopic,
    Student,
    StudentAssignment,
    User,
    UserRole,
)

CSRF_TOKEN = "test-csrf-token"


@pytest.fixture()
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db_session(db_engine):
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    clear_rate_limit_store()
    yield
    clear_rate_limit_store()


@pytest.fixture()
def make_client(db_session):
    """Build TestClients acting as a given user or student.

    With ``csrf=True`` the client carries a matching CSRF cookie and header.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.main import app

    settings = get_settings()
    app.dependency_overrides[get_db] = override_get_db

    def factory(user=None, student=None, csrf=True):
        client = TestClient(app)
        if user is not None:
            token = create_access_token(subject=user.id, role=user.role.value)
            client.cookies.set(settings.session_cookie_name, token)
        if student is not None:
            token = create_student_token(student.id, student.email, student.name)
            client.headers["Authorization"] = f"Bearer {token}"
        if csrf:
            client.cookies.set(settings.csrf_cookie_name, CSRF_TOKEN)
            client.headers[settings.csrf_header_name] = CSRF_TOKEN
        return client

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client):
    return make_client()


def create_user(db, name, email, password="teacher123", role=UserRole.TEACHER, subscription_end_date=None):
    user = User(
        name=name,
        email=email,
        password=hash_password(password),
        role=role,
        subscription_end_date=subscription_end_date,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def teacher(db_session):
    return create_user(
        db_session,
        "Ayşe Yılmaz",
        "ayse@example.com",
        subscription_end_date=datetime.utcnow() + timedelta(days=30),
    )


@pytest.fixture()
def other_teacher(db_session):
    return create_user(db_session, "Mehmet Demir", "mehmet@example.com")


@pytest.fixture()
def admin(db_session):
    return create_user(db_session, "Super Admin", "admin@example.com", password="admin123", role=UserRole.SUPER_ADMIN)


@pytest.fixture()
def student(db_session, teacher):
    student = Student(
        id="s1",
        name="Ali Kaya",
        email="ali@example.com",
        password=hash_password("student123"),
        teacher_id=teacher.id,
    )
    db_session.add(student)
    db_session.commit()
    db_session.refresh(student)
    return student


@pytest.fixture()
def teacher_client(make_client, teacher):
    return make_client(user=teacher)


@pytest.fixture()
def admin_client(make_client, admin):
    return make_client(user=admin)


@pytest.fixture()
def make_lesson(db_session):
    def factory(owner, name="Matematik", topics=(), **values):
        lesson = Lesson(name=name, lesson_group=values.pop("lesson_group", "9. Sınıf"), teacher_id=owner.id, **values)
        for order, topic_name in enumerate(topics, start=1):
            lesson.topics.append(LessonTopic(lesson_topic_name=topic_name, lesson_topic_order=order))
        db_session.add(lesson)
        db_session.commit()
        db_session.refresh(lesson)
        return lesson

    return factory


@pytest.fixture()
def make_resource(db_session):
    def factory(owner, lesson, question_counts, name="Kaynak Kitap"):
        resource = Resource(resource_name=name, teacher_id=owner.id)
        link = ResourceLesson(lesson_id=lesson.id)
        resource.lessons.append(link)
        for topic_id, count in question_counts.items():
            link.topics.append(ResourceTopic(resource=resource, lesson_topic_id=topic_id, question_count=count))
        db_session.add(resource)
        db_session.commit()
        db_session.refresh(resource)
        return resource

    return factory


@pytest.fixture()
def make_assignment(db_session):
    def factory(student, topic):
        assignment = StudentAssignment(student_id=student.id, lesson_topic_id=topic.id)
        db_session.add(assignment)
        db_session.commit()
        db_session.refresh(assignment)
        return assignment

    return factory
