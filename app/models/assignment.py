from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class StudentAssignment(Base):
    __tablename__ = "student_assignments"
    __table_args__ = (UniqueConstraint("student_id", "lesson_topic_id", name="uq_student_topic"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    student_id = Column(String(32), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_topic_id = Column(String(32), ForeignKey("lesson_topics.id", ondelete="CASCADE"), nullable=False)
    assigned_at = Column(DateTime, default=datetime.utcnow)
    completed = Column(Boolean, nullable=False, default=False)
    student_assignment_completed_at = Column(DateTime, nullable=True)
    # resourceId -> topicId -> question count
    question_counts = Column(JSON, nullable=True)

    student = relationship("Student", back_populates="assignments")
    topic = relationship("LessonTopic", back_populates="assignments")
    progress = relationship("StudentProgress", back_populates="assignment", cascade="all, delete-orphan")
    week_topics = relationship("WeeklyScheduleTopic", back_populates="assignment", cascade="all, delete-orphan")
