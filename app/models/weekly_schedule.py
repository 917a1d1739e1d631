from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class WeeklySchedule(Base):
    __tablename__ = "weekly_schedules"

    id = Column(String(32), primary_key=True, default=generate_id)
    student_id = Column(String(32), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("Student", back_populates="schedules")
    weeks = relationship(
        "WeeklyScheduleWeek",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="WeeklyScheduleWeek.week_number",
    )


class WeeklyScheduleWeek(Base):
    __tablename__ = "weekly_schedule_weeks"
    __table_args__ = (UniqueConstraint("schedule_id", "week_number", name="uq_schedule_week_number"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    schedule_id = Column(String(32), ForeignKey("weekly_schedules.id", ondelete="CASCADE"), nullable=False)
    week_number = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    schedule = relationship("WeeklySchedule", back_populates="weeks")
    topics = relationship(
        "WeeklyScheduleTopic",
        back_populates="week",
        cascade="all, delete-orphan",
        order_by="WeeklyScheduleTopic.topic_order",
    )


class WeeklyScheduleTopic(Base):
    __tablename__ = "weekly_schedule_topics"
    __table_args__ = (UniqueConstraint("week_plan_id", "assignment_id", name="uq_week_assignment"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    week_plan_id = Column(String(32), ForeignKey("weekly_schedule_weeks.id", ondelete="CASCADE"), nullable=False)
    assignment_id = Column(
        String(32), ForeignKey("student_assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    topic_order = Column(Integer, nullable=False, default=1)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    week = relationship("WeeklyScheduleWeek", back_populates="topics")
    assignment = relationship("StudentAssignment", back_populates="week_topics")
