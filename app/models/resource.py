from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(32), primary_key=True, default=generate_id)
    resource_name = Column(String, nullable=False)
    resource_description = Column(Text, nullable=True)
    teacher_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher = relationship("User", back_populates="resources")
    lessons = relationship("ResourceLesson", back_populates="resource", cascade="all, delete-orphan")
    topics = relationship("ResourceTopic", back_populates="resource", cascade="all, delete-orphan")
    progress = relationship("StudentProgress", back_populates="resource", cascade="all, delete-orphan")


class ResourceLesson(Base):
    __tablename__ = "resource_lessons"
    __table_args__ = (UniqueConstraint("resource_id", "lesson_id", name="uq_resource_lesson"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    resource_id = Column(String(32), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    lesson_id = Column(String(32), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False)

    resource = relationship("Resource", back_populates="lessons")
    lesson = relationship("Lesson", back_populates="resource_links")
    topics = relationship("ResourceTopic", back_populates="resource_lesson", cascade="all, delete-orphan")


class ResourceTopic(Base):
    __tablename__ = "resource_topics"
    __table_args__ = (UniqueConstraint("resource_id", "lesson_topic_id", name="uq_resource_topic"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    resource_lesson_id = Column(String(32), ForeignKey("resource_lessons.id", ondelete="CASCADE"), nullable=False)
    resource_id = Column(String(32), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    lesson_topic_id = Column(String(32), ForeignKey("lesson_topics.id", ondelete="CASCADE"), nullable=False, index=True)
    question_count = Column(Integer, nullable=False, default=0)

    resource_lesson = relationship("ResourceLesson", back_populates="topics")
    resource = relationship("Resource", back_populates="topics")
    topic = relationship("LessonTopic", back_populates="resource_topics")
