"""Persistence models: ORM entities, mixins, and the entity-type registry."""

from collections.abc import Mapping
from types import MappingProxyType

from app.domain.enums import EntityType
from app.infrastructure.persistence.models.council import (
    Council,
    CouncilMember,
    DefenseMemberResult,
    DefenseSchedule,
    ReviewAssignment,
    ReviewSchedule,
)
from app.infrastructure.persistence.models.decision import Decision, SubmissionPeriod
from app.infrastructure.persistence.models.document import Document
from app.infrastructure.persistence.models.group import Group, GroupMember, GroupMentor
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    SoftDeleteModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.progress import (
    Feedback,
    MeetingSchedule,
    ProgressReport,
    ProgressReportMentor,
)
from app.infrastructure.persistence.models.role import Role, UserRole
from app.infrastructure.persistence.models.semester import Semester
from app.infrastructure.persistence.models.student import SemesterStudent, Student
from app.infrastructure.persistence.models.system_log import SystemLog
from app.infrastructure.persistence.models.topic import (
    Topic,
    TopicAssignment,
    TopicRegistration,
)
from app.infrastructure.persistence.models.user import RefreshToken, User

# EntityType values are the model class names.
MODEL_REGISTRY: Mapping[EntityType, type[SoftDeleteModel]] = MappingProxyType({
    EntityType(model.__name__): model
    for model in (
        User,
        Role,
        Semester,
        UserRole,
        RefreshToken,
        Student,
        SemesterStudent,
        Topic,
        TopicRegistration,
        TopicAssignment,
        Group,
        GroupMember,
        GroupMentor,
        ProgressReport,
        MeetingSchedule,
        Feedback,
        Document,
        ProgressReportMentor,
        SubmissionPeriod,
        Decision,
        Council,
        CouncilMember,
        ReviewSchedule,
        ReviewAssignment,
        DefenseSchedule,
        DefenseMemberResult,
    )
})

__all__ = [
    "MODEL_REGISTRY",
    "Council",
    "CouncilMember",
    "CuidMixin",
    "Decision",
    "DefenseMemberResult",
    "DefenseSchedule",
    "Document",
    "Feedback",
    "Group",
    "GroupMember",
    "GroupMentor",
    "MeetingSchedule",
    "ProgressReport",
    "ProgressReportMentor",
    "RefreshToken",
    "ReviewAssignment",
    "ReviewSchedule",
    "Role",
    "Semester",
    "SemesterStudent",
    "SoftDeleteMixin",
    "SoftDeleteModel",
    "Student",
    "SubmissionPeriod",
    "SystemLog",
    "TimestampMixin",
    "Topic",
    "TopicAssignment",
    "TopicRegistration",
    "User",
    "UserRole",
]
