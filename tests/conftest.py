"""Pytest configuration and fixtures for the lifecycle engine.

Integration and API tests run against in-memory SQLite (aiosqlite) with the
schema created from the ORM metadata for every test, so no external
database is needed. Settings env vars are set before any app import.
"""

import itertools
import os
from datetime import UTC, date, datetime, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-lifecycle-tests-only")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.dependencies import get_lifecycle_store
from app.application.services.audit_recorder import AuditRecorder
from app.application.services.lifecycle_coordinator import LifecycleCoordinator
from app.application.services.role_registry import get_role_registry
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models import (
    Council,
    CouncilMember,
    Decision,
    DefenseMemberResult,
    DefenseSchedule,
    Document,
    Feedback,
    Group,
    GroupMember,
    GroupMentor,
    MeetingSchedule,
    ProgressReport,
    ProgressReportMentor,
    RefreshToken,
    ReviewAssignment,
    ReviewSchedule,
    Role,
    Semester,
    SemesterStudent,
    Student,
    SubmissionPeriod,
    SystemLog,
    Topic,
    TopicAssignment,
    TopicRegistration,
    User,
    UserRole,
)
from app.infrastructure.persistence.repositories import SqlLifecycleStore
from app.infrastructure.security.jwt import create_access_token
from app.main import create_app


class SeedData:
    """Inserts rows in committed transactions and reads back soft-delete state."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory
        self._roles: dict[str, Role] = {}
        self._seq = itertools.count(1)

    async def add(self, *rows):
        async with self._session_factory() as session, session.begin():
            session.add_all(rows)
        return rows[0] if len(rows) == 1 else rows

    # ---- builders ----

    async def user(self, username: str | None = None, **kwargs) -> User:
        username = username or f"user{next(self._seq)}"
        kwargs.setdefault("email", f"{username}@example.edu")
        kwargs.setdefault("full_name", username.title())
        kwargs.setdefault("password_hash", "$2b$12$notarealhash")
        return await self.add(User(username=username, **kwargs))

    async def semester(self, code: str | None = None, **kwargs) -> Semester:
        code = code or f"SEM{next(self._seq)}"
        kwargs.setdefault("start_date", date(2025, 1, 6))
        kwargs.setdefault("end_date", date(2025, 5, 30))
        kwargs.setdefault("status", "ACTIVE")
        return await self.add(Semester(code=code, name=code, **kwargs))

    async def role(self, name: str) -> Role:
        if name not in self._roles:
            self._roles[name] = await self.add(
                Role(name=name, is_system_wide=get_role_registry().is_system_wide(name))
            )
        return self._roles[name]

    async def assign(
        self, user: User, role_name: str, semester: Semester | None = None, **kwargs
    ) -> UserRole:
        role = await self.role(role_name)
        return await self.add(
            UserRole(
                user_id=user.id,
                role_id=role.id,
                semester_id=semester.id if semester else None,
                **kwargs,
            )
        )

    async def topic(
        self,
        semester: Semester,
        creator: User,
        *,
        supervisor: User | None = None,
        sub_supervisor: User | None = None,
    ) -> Topic:
        n = next(self._seq)
        return await self.add(
            Topic(
                semester_id=semester.id,
                created_by=creator.id,
                main_supervisor=supervisor.id if supervisor else None,
                sub_supervisor=sub_supervisor.id if sub_supervisor else None,
                topic_code=f"T{n:04d}",
                name=f"Topic {n}",
            )
        )

    async def registration(self, topic: Topic, user: User) -> TopicRegistration:
        return await self.add(TopicRegistration(topic_id=topic.id, user_id=user.id))

    async def student(self, user: User) -> Student:
        return await self.add(
            Student(user_id=user.id, student_code=f"SE{next(self._seq):05d}")
        )

    async def enroll(self, student: Student, semester: Semester) -> SemesterStudent:
        return await self.add(SemesterStudent(student_id=student.id, semester_id=semester.id))

    async def group(self, semester: Semester) -> Group:
        return await self.add(Group(semester_id=semester.id, group_code=f"G{next(self._seq)}"))

    async def member(self, group: Group, user: User) -> GroupMember:
        return await self.add(GroupMember(group_id=group.id, user_id=user.id))

    async def mentor(
        self, group: Group, user: User, *, added_by: User | None = None
    ) -> GroupMentor:
        return await self.add(
            GroupMentor(
                group_id=group.id,
                mentor_id=user.id,
                added_by=added_by.id if added_by else None,
            )
        )

    async def topic_assignment(self, topic: Topic, group: Group, by: User) -> TopicAssignment:
        return await self.add(
            TopicAssignment(topic_id=topic.id, group_id=group.id, assigned_by=by.id)
        )

    async def meeting(self, group: Group) -> MeetingSchedule:
        return await self.add(
            MeetingSchedule(group_id=group.id, meeting_time=datetime(2025, 3, 3, 9, tzinfo=UTC))
        )

    async def feedback(self, meeting: MeetingSchedule) -> Feedback:
        return await self.add(Feedback(meeting_id=meeting.id, content="Good progress"))

    async def progress_report(self, group: Group) -> ProgressReport:
        return await self.add(ProgressReport(group_id=group.id, week_number=1))

    async def document(self, uploader: User, topic: Topic | None = None) -> Document:
        n = next(self._seq)
        return await self.add(
            Document(
                uploaded_by=uploader.id,
                topic_id=topic.id if topic else None,
                file_name=f"doc{n}.pdf",
                file_url=f"https://files.example.edu/doc{n}.pdf",
            )
        )

    async def refresh_token(self, user: User) -> RefreshToken:
        return await self.add(
            RefreshToken(
                user_id=user.id,
                token=f"rt-{next(self._seq)}",
                expires_at=datetime.now(UTC) + timedelta(days=7),
            )
        )

    async def report_mentor(self, report: ProgressReport, mentor: User) -> ProgressReportMentor:
        return await self.add(ProgressReportMentor(report_id=report.id, mentor_id=mentor.id))

    async def submission_period(self, semester: Semester, creator: User) -> SubmissionPeriod:
        return await self.add(
            SubmissionPeriod(
                semester_id=semester.id,
                created_by=creator.id,
                start_date=datetime(2025, 1, 13, tzinfo=UTC),
                end_date=datetime(2025, 2, 14, tzinfo=UTC),
            )
        )

    async def decision(self, creator: User, semester: Semester | None = None) -> Decision:
        return await self.add(
            Decision(
                created_by=creator.id,
                semester_id=semester.id if semester else None,
                decision_name=f"QD-{next(self._seq)}",
            )
        )

    async def council(
        self, semester: Semester, *, period: SubmissionPeriod | None = None
    ) -> Council:
        n = next(self._seq)
        return await self.add(
            Council(
                semester_id=semester.id,
                submission_period_id=period.id if period else None,
                code=f"C{n:03d}",
                name=f"Council {n}",
            )
        )

    async def council_member(self, council: Council, user: User) -> CouncilMember:
        return await self.add(CouncilMember(council_id=council.id, user_id=user.id))

    async def review_schedule(self, council: Council, group: Group, topic: Topic) -> ReviewSchedule:
        return await self.add(
            ReviewSchedule(
                council_id=council.id,
                group_id=group.id,
                topic_id=topic.id,
                review_time=datetime(2025, 4, 7, 8, tzinfo=UTC),
            )
        )

    async def review_assignment(
        self,
        council: Council,
        topic: Topic,
        *,
        reviewer: User | None = None,
        schedule: ReviewSchedule | None = None,
    ) -> ReviewAssignment:
        return await self.add(
            ReviewAssignment(
                council_id=council.id,
                topic_id=topic.id,
                reviewer_id=reviewer.id if reviewer else None,
                review_schedule_id=schedule.id if schedule else None,
            )
        )

    async def defense_schedule(self, council: Council, group: Group) -> DefenseSchedule:
        return await self.add(
            DefenseSchedule(
                council_id=council.id,
                group_id=group.id,
                defense_time=datetime(2025, 5, 19, 8, tzinfo=UTC),
            )
        )

    async def defense_result(
        self, schedule: DefenseSchedule, student: Student
    ) -> DefenseMemberResult:
        return await self.add(
            DefenseMemberResult(defense_schedule_id=schedule.id, student_id=student.id)
        )

    # ---- readers ----

    async def is_deleted(self, row) -> bool:
        model = type(row)
        async with self._session_factory() as session:
            result = await session.execute(select(model.is_deleted).where(model.id == row.id))
            return result.scalar_one()

    async def deleted_map(self, *rows) -> dict[str, bool]:
        return {row.id: await self.is_deleted(row) for row in rows}

    async def audit_entries(self, action: str | None = None) -> list[SystemLog]:
        async with self._session_factory() as session:
            stmt = select(SystemLog).order_by(SystemLog.created_at, SystemLog.id)
            if action is not None:
                stmt = stmt.where(SystemLog.action == action)
            return list((await session.execute(stmt)).scalars().all())


@pytest.fixture
async def engine():
    """Fresh in-memory SQLite database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
def store(session_factory) -> SqlLifecycleStore:
    return SqlLifecycleStore(session_factory)


@pytest.fixture
def audit_recorder(store) -> AuditRecorder:
    return AuditRecorder(store)


@pytest.fixture
def coordinator(store, audit_recorder) -> LifecycleCoordinator:
    return LifecycleCoordinator(store, audit_recorder)


@pytest.fixture
def seed(session_factory) -> SeedData:
    return SeedData(session_factory)


@pytest.fixture
async def client(store) -> AsyncClient:
    """Async HTTP client against a fresh app wired to the test database."""
    app = create_app()
    app.dependency_overrides[get_lifecycle_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def bearer():
    """Build Authorization headers for a seeded user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
