"""Domain enumerations.

Enums represent fixed sets of domain values: role names, the actions those
roles may perform, entity types known to the lifecycle catalog, and the
cascade policies that govern soft-delete propagation.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoleName(_ValuesMixin, str, Enum):
    """Role names known to the Role Registry (stored in role.name)."""

    ADMIN = "admin"
    GRADUATION_THESIS_MANAGER = "graduation_thesis_manager"
    ACADEMIC_OFFICER = "academic_officer"
    EXAMINATION_OFFICER = "examination_officer"
    DEAN = "dean"
    HEAD_OF_DEPARTMENT = "head_of_department"
    LECTURER = "lecturer"
    MENTOR = "mentor"
    REVIEWER = "reviewer"
    CHAIRMAN = "chairman"
    SECRETARY = "secretary"
    COUNCIL_MEMBER = "council_member"
    LEADER = "leader"
    STUDENT = "student"


class Action(_ValuesMixin, str, Enum):
    """Actions guarded by the Authorization Evaluator."""

    DELETE_USER = "user:delete"
    DELETE_ALL_USERS = "user:delete_all"
    RESTORE_USER = "user:restore"
    MANAGE_USER_ROLES = "user_role:update"
    DELETE_SEMESTER = "semester:delete"
    RESTORE_SEMESTER = "semester:restore"
    DELETE_TOPIC = "topic:delete"
    RESTORE_TOPIC = "topic:restore"
    CREATE_TOPIC = "topic:create"
    REVIEW_TOPIC = "topic:review"
    REGISTER_TOPIC = "topic:register"
    EXPORT_TOPICS = "topic:export"
    MANAGE_SUBMISSION_PERIOD = "submission_period:update"
    VIEW_SUBMISSION_PERIOD = "submission_period:read"
    MANAGE_COUNCIL = "council:update"
    SCORE_DEFENSE = "council:score"
    MENTOR_GROUP = "group:mentor"
    SUBMIT_PROGRESS_REPORT = "progress_report:submit"
    VIEW_AUDIT_LOG = "audit_log:read"


class EntityType(_ValuesMixin, str, Enum):
    """Entity types declared in the Entity Graph Catalog (ORM class names)."""

    USER = "User"
    ROLE = "Role"
    SEMESTER = "Semester"
    USER_ROLE = "UserRole"
    REFRESH_TOKEN = "RefreshToken"
    STUDENT = "Student"
    SEMESTER_STUDENT = "SemesterStudent"
    TOPIC = "Topic"
    TOPIC_REGISTRATION = "TopicRegistration"
    TOPIC_ASSIGNMENT = "TopicAssignment"
    GROUP = "Group"
    GROUP_MEMBER = "GroupMember"
    GROUP_MENTOR = "GroupMentor"
    PROGRESS_REPORT = "ProgressReport"
    MEETING_SCHEDULE = "MeetingSchedule"
    FEEDBACK = "Feedback"
    DOCUMENT = "Document"
    PROGRESS_REPORT_MENTOR = "ProgressReportMentor"
    SUBMISSION_PERIOD = "SubmissionPeriod"
    DECISION = "Decision"
    COUNCIL = "Council"
    COUNCIL_MEMBER = "CouncilMember"
    REVIEW_SCHEDULE = "ReviewSchedule"
    REVIEW_ASSIGNMENT = "ReviewAssignment"
    DEFENSE_SCHEDULE = "DefenseSchedule"
    DEFENSE_MEMBER_RESULT = "DefenseMemberResult"


class CascadePolicy(_ValuesMixin, str, Enum):
    """How a parent soft-delete propagates to rows of a child type.

    CASCADE: child rows are soft-deleted with the parent.
    BLOCK: active child rows abort the whole cascade.
    IGNORE: the reference is declared but never followed.
    """

    CASCADE = "cascade"
    BLOCK = "block"
    IGNORE = "ignore"


class SemesterStatus(_ValuesMixin, str, Enum):
    """Semester status. Transitions are driven by an external scheduler."""

    UPCOMING = "UPCOMING"
    ACTIVE = "ACTIVE"
    COMPLETE = "COMPLETE"


class LifecycleOutcome(_ValuesMixin, str, Enum):
    """Result variant of a lifecycle operation."""

    DELETED = "deleted"
    PARTIALLY_DELETED = "partially_deleted"
    RESTORED = "restored"
    ALREADY_IN_STATE = "already_in_state"


class DenialReason(_ValuesMixin, str, Enum):
    """Why the Authorization Evaluator denied a request."""

    INSUFFICIENT_ROLE = "insufficient role"
    MISSING_SEMESTER_CONTEXT = "missing semester context"
    ROLE_NOT_VALID_FOR_SEMESTER = "role not valid for semester"
