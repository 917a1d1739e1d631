from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class StudentProgress(Base):
    __tablename__ = "student_progress"
    __table_args__ = (
        UniqueConstraint("student_id", "student_assignment_id", "resource_id", name="uq_student_assignment_resource"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    student_id = Column(String(32), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    student_assignment_id = Column(
        String(32), ForeignKey("student_assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    resource_id = Column(String(32), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    lesson_topic_id = Column(String(32), ForeignKey("lesson_topics.id", ondelete="CASCADE"), nullable=False)

    solved_count = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    wrong_count = Column(Integer, nullable=False, default=0)
    empty_count = Column(Integer, nullable=False, default=0)
    # legacy target count, not maintained by every write path
    total_count = Column(Integer, nullable=True)
    last_solved_at = Column(DateTime, default=datetime.utcnow)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("Student", back_populates="progress")
    assignment = relationship("StudentAssignment", back_populates="progress")
    resource = relationship("Resource", back_populates="progress")
    topic = relationship("LessonTopic")
