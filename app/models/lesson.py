import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class ExamType(str, enum.Enum):
    TYT = "TYT"
    AYT = "AYT"


class LessonColor(str, enum.Enum):
    blue = "blue"
    purple = "purple"
    green = "green"
    emerald = "emerald"
    orange = "orange"
    red = "red"
    gray = "gray"


COLOR_PALETTE = [color.value for color in LessonColor]


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    lesson_group = Column(String, nullable=False)
    lesson_exam_type = Column(Enum(ExamType, name="exam_type"), nullable=False, default=ExamType.TYT)
    lesson_subject = Column(String, nullable=True)
    color = Column(Enum(LessonColor, name="lesson_color"), nullable=False, default=LessonColor.blue)
    teacher_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher = relationship("User", back_populates="lessons")
    topics = relationship(
        "LessonTopic",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="LessonTopic.lesson_topic_order",
    )
    resource_links = relationship("ResourceLesson", back_populates="lesson", cascade="all, delete-orphan")


class LessonTopic(Base):
    __tablename__ = "lesson_topics"

    id = Column(String(32), primary_key=True, default=generate_id)
    lesson_topic_name = Column(String, nullable=False)
    lesson_topic_order = Column(Integer, nullable=False, default=1)
    lesson_id = Column(String(32), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lesson = relationship("Lesson", back_populates="topics")
    resource_topics = relationship("ResourceTopic", back_populates="topic", cascade="all, delete-orphan")
    assignments = relationship("StudentAssignment", back_populates="topic", cascade="all, delete-orphan")
