from app.models.user import User, UserRole
from app.models.student import Student
from app.models.lesson import Lesson, LessonTopic, ExamType, LessonColor, COLOR_PALETTE
from app.models.resource import Resource, ResourceLesson, ResourceTopic
from app.models.assignment import StudentAssignment
from app.models.progress import StudentProgress
from app.models.weekly_schedule import WeeklySchedule, WeeklyScheduleWeek, WeeklyScheduleTopic

__all__ = [
    "User",
    "UserRole",
    "Student",
    "Lesson",
    "LessonTopic",
    "ExamType",
    "LessonColor",
    "COLOR_PALETTE",
    "Resource",
    "ResourceLesson",
    "ResourceTopic",
    "StudentAssignment",
    "StudentProgress",
    "WeeklySchedule",
    "WeeklyScheduleWeek",
    "WeeklyScheduleTopic",
]
