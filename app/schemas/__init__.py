from app.schemas.common import (
    ApiModel,
    ApiOut,
    MessageOut,
    PaginationOut,
    PaginationParams,
    SuccessOut,
    ValidationResult,
    validate_request,
    format_validation_errors,
    pagination_meta,
)
from app.schemas.auth import (
    LoginRequest,
    StudentLoginRequest,
    ProfileUpdate,
    PasswordChange,
    UserOut,
    LoginOut,
    CsrfTokenOut,
    PasswordChangeOut,
)
from app.schemas.lesson import LessonCreate, LessonUpdate, LessonOut, LessonListItemOut, LessonRecolorOut
from app.schemas.topic import (
    TopicCreate,
    TopicUpdate,
    TopicReorder,
    TopicOut,
    TopicWithCountOut,
    TopicWithLessonOut,
    LessonDetailOut,
    TopicOrderFixOut,
)
from app.schemas.resource import (
    ResourceCreate,
    ResourceUpdate,
    ResourceLessonIn,
    ResourceTopicIn,
    ResourceOut,
    ResourcePage,
)
from app.schemas.assignment import (
    AssignmentReplace,
    AssignmentUpdate,
    QuestionCounts,
    AssignmentOut,
    AssignmentDetailOut,
    AssignmentReplaceOut,
)
from app.schemas.progress import (
    ProgressUpsert,
    ProgressIncrement,
    ProgressUpdate,
    ProgressAnswers,
    ProgressInitialize,
    ProgressOut,
    ProgressDetailOut,
    ProgressAnswersOut,
    ProgressInitializeOut,
)
from app.schemas.student import StudentCreate, StudentUpdate, StudentOut, StudentDetailOut, StudentPage, StudentLoginOut
from app.schemas.weekly_schedule import (
    WeeklyScheduleCreate,
    WeeklyScheduleUpdate,
    WeekUpdate,
    WeekTopicIn,
    WeeklyScheduleOut,
    WeeklyScheduleDetailOut,
    WeekOut,
    WeekDetailOut,
    WeekWithScheduleOut,
    WeekPage,
)
from app.schemas.teacher import TeacherCreate, TeacherUpdate, TeacherOut, TeacherListOut

__all__ = [
    "ApiModel",
    "ApiOut",
    "MessageOut",
    "PaginationOut",
    "PaginationParams",
    "SuccessOut",
    "ValidationResult",
    "validate_request",
    "format_validation_errors",
    "pagination_meta",
    "LoginRequest",
    "StudentLoginRequest",
    "ProfileUpdate",
    "PasswordChange",
    "UserOut",
    "LoginOut",
    "CsrfTokenOut",
    "PasswordChangeOut",
    "LessonCreate",
    "LessonUpdate",
    "LessonOut",
    "LessonListItemOut",
    "LessonRecolorOut",
    "TopicCreate",
    "TopicUpdate",
    "TopicReorder",
    "TopicOut",
    "TopicWithCountOut",
    "TopicWithLessonOut",
    "LessonDetailOut",
    "TopicOrderFixOut",
    "ResourceCreate",
    "ResourceUpdate",
    "ResourceLessonIn",
    "ResourceTopicIn",
    "ResourceOut",
    "ResourcePage",
    "AssignmentReplace",
    "AssignmentUpdate",
    "QuestionCounts",
    "AssignmentOut",
    "AssignmentDetailOut",
    "AssignmentReplaceOut",
    "ProgressUpsert",
    "ProgressIncrement",
    "ProgressUpdate",
    "ProgressAnswers",
    "ProgressInitialize",
    "ProgressOut",
    "ProgressDetailOut",
    "ProgressAnswersOut",
    "ProgressInitializeOut",
    "StudentCreate",
    "StudentUpdate",
    "StudentOut",
    "StudentDetailOut",
    "StudentPage",
    "StudentLoginOut",
    "WeeklyScheduleCreate",
    "WeeklyScheduleUpdate",
    "WeekUpdate",
    "WeekTopicIn",
    "WeeklyScheduleOut",
    "WeeklyScheduleDetailOut",
    "WeekOut",
    "WeekDetailOut",
    "WeekWithScheduleOut",
    "WeekPage",
    "TeacherCreate",
    "TeacherUpdate",
    "TeacherOut",
    "TeacherListOut",
]
