"""Weekly study schedule generation.

A schedule is split into 7-day weeks and the chosen assignments are spread
over them round-robin by lesson: week ``w`` gets the ``w``-th topic (by
topic order) of every lesson that still has one left.
"""
import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Dict, Hashable, List, Sequence, Tuple, TypeVar

from sqlalchemy.orm import Session, joinedload

from app.core.errors import BadRequest
from app.models import LessonTopic, Student, StudentAssignment, WeeklySchedule, WeeklyScheduleTopic, WeeklyScheduleWeek

T = TypeVar("T")

WEEK = timedelta(days=7)


def week_count(start: datetime, end: datetime) -> int:
    return max(1, math.ceil((end - start) / WEEK))


def week_spans(start: datetime, end: datetime) -> List[Tuple[datetime, datetime]]:
    spans = []
    for index in range(week_count(start, end)):
        week_start = start + WEEK * index
        spans.append((week_start, week_start + timedelta(days=6)))
    return spans


def distribute_round_robin(
    items: Sequence[T],
    group_key,
    order_key,
    weeks: int,
) -> List[List[T]]:
    """Place ``items`` into ``weeks`` buckets.

    Items are grouped by ``group_key`` (groups keep first-appearance order)
    and each group is sorted by ``order_key``. Bucket ``w`` receives the
    ``w``-th item of every group that has one; items past the last bucket
    are left out.
    """
    groups: "OrderedDict[Hashable, List[T]]" = OrderedDict()
    for item in items:
        groups.setdefault(group_key(item), []).append(item)
    for members in groups.values():
        members.sort(key=order_key)

    buckets: List[List[T]] = [[] for _ in range(weeks)]
    for members in groups.values():
        for index, item in enumerate(members[:weeks]):
            buckets[index].append(item)
    return buckets


def create_weekly_schedule(
    db: Session,
    student: Student,
    title: str,
    start_date: datetime,
    end_date: datetime,
    assignment_ids: List[str],
) -> WeeklySchedule:
    """Build the schedule, its weeks and topic placements. The caller commits."""
    unique_ids = list(OrderedDict.fromkeys(assignment_ids))
    assignments: Dict[str, StudentAssignment] = {}
    if unique_ids:
        assignments = {
            assignment.id: assignment
            for assignment in db.query(StudentAssignment)
            .options(joinedload(StudentAssignment.topic).joinedload(LessonTopic.lesson))
            .filter(StudentAssignment.id.in_(unique_ids))
            .all()
        }
    for assignment_id in unique_ids:
        assignment = assignments.get(assignment_id)
        if assignment is None or assignment.student_id != student.id:
            raise BadRequest("Ödev bu öğrenciye ait değil", details={"assignmentId": assignment_id})

    schedule = WeeklySchedule(
        student_id=student.id,
        title=title,
        start_date=start_date,
        end_date=end_date,
    )
    db.add(schedule)

    spans = week_spans(start_date, end_date)
    buckets = distribute_round_robin(
        [assignments[assignment_id] for assignment_id in unique_ids],
        group_key=lambda assignment: assignment.topic.lesson_id,
        order_key=lambda assignment: assignment.topic.lesson_topic_order,
        weeks=len(spans),
    )

    for number, ((week_start, week_end), bucket) in enumerate(zip(spans, buckets), start=1):
        week = WeeklyScheduleWeek(week_number=number, start_date=week_start, end_date=week_end)
        schedule.weeks.append(week)
        for topic_order, assignment in enumerate(bucket, start=1):
            week.topics.append(WeeklyScheduleTopic(assignment_id=assignment.id, topic_order=topic_order))

    db.flush()
    return schedule
