from typing import List

from sqlalchemy.orm import Session

from app.models import Lesson, LessonColor, COLOR_PALETTE


def pick_lesson_color(db: Session, teacher_id: str) -> LessonColor:
    """First palette color none of the teacher's lessons use yet, ``blue`` once all are taken."""
    used = {
        color.value if isinstance(color, LessonColor) else color
        for (color,) in db.query(Lesson.color).filter(Lesson.teacher_id == teacher_id).all()
    }
    for color in COLOR_PALETTE:
        if color not in used:
            return LessonColor(color)
    return LessonColor.blue


def assign_colors(db: Session, teacher_id: str) -> List[Lesson]:
    lessons = (
        db.query(Lesson)
        .filter(Lesson.teacher_id == teacher_id)
        .order_by(Lesson.created_at.asc(), Lesson.id.asc())
        .all()
    )
    for index, lesson in enumerate(lessons):
        lesson.color = LessonColor(COLOR_PALETTE[index % len(COLOR_PALETTE)])
    return lessons
