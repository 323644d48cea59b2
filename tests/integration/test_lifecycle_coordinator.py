"""Lifecycle Coordinator against a real (SQLite) store."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.application.services.entity_graph import get_entity_graph_catalog
from app.domain.enums import EntityType, LifecycleOutcome
from app.domain.exceptions import (
    BlockedByActiveChildrenException,
    ParentDeletedException,
    ProtectedEntityException,
    ResourceNotFoundException,
    ScopeConflictException,
    TransactionFailureException,
    ValidationException,
)
from app.infrastructure.persistence.models import MODEL_REGISTRY
from app.infrastructure.persistence.repositories import LifecycleRepository


async def _orphans(session_factory) -> list[tuple[str, str]]:
    """Deleted dependent rows none of whose catalog parents is deleted."""
    catalog = get_entity_graph_catalog()
    orphans: list[tuple[str, str]] = []
    async with session_factory() as session:
        for entity_type, model in MODEL_REGISTRY.items():
            parents = catalog.parents_of(entity_type)
            if not parents:
                continue
            rows = (
                await session.execute(select(model).where(model.is_deleted.is_(True)))
            ).scalars().all()
            for row in rows:
                has_deleted_parent = False
                for rel in parents:
                    parent_id = getattr(row, rel.foreign_key)
                    if parent_id is None:
                        continue
                    parent_model = MODEL_REGISTRY[rel.parent_type]
                    parent_deleted = (
                        await session.execute(
                            select(parent_model.is_deleted).where(parent_model.id == parent_id)
                        )
                    ).scalar_one()
                    if parent_deleted:
                        has_deleted_parent = True
                        break
                if not has_deleted_parent:
                    orphans.append((entity_type.value, row.id))
    return orphans


class TestScopedPrincipalDelete:
    async def test_only_rows_of_scope_semester_are_deleted(self, seed, coordinator):
        admin = await seed.user("admin")
        u = await seed.user("u")
        s1, s2 = await seed.semester("S1"), await seed.semester("S2")
        role_s1 = await seed.assign(u, "mentor", s1)
        role_s2 = await seed.assign(u, "mentor", s2)
        reviewer_s2 = await seed.assign(u, "reviewer", s2)
        t1 = await seed.topic(s1, u)
        t2 = await seed.topic(s2, u)
        doc_t1 = await seed.document(u, t1)
        g1, g2 = await seed.group(s1), await seed.group(s2)
        assignment_t1 = await seed.topic_assignment(t1, g1, u)
        membership = await seed.member(g2, u)
        token = await seed.refresh_token(u)

        result = await coordinator.cascade_soft_delete(
            EntityType.USER, u.id, admin.id, scope_semester_id=s1.id
        )

        assert result.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert not result.root_deleted
        assert result.counts == {
            "UserRole": 1,
            "Topic": 1,
            "TopicAssignment": 1,
            "Document": 1,
        }
        assert await seed.deleted_map(role_s1, t1, doc_t1, assignment_t1) == {
            row.id: True for row in (role_s1, t1, doc_t1, assignment_t1)
        }
        untouched = (u, role_s2, reviewer_s2, t2, g1, g2, membership, token, s1)
        assert await seed.deleted_map(*untouched) == {row.id: False for row in untouched}

    async def test_student_container_released_with_last_enrolment(self, seed, coordinator):
        u = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        await seed.assign(u, "student", s1)
        await seed.assign(u, "student", s2)
        student = await seed.student(u)
        enrol_s1 = await seed.enroll(student, s1)
        enrol_s2 = await seed.enroll(student, s2)
        token = await seed.refresh_token(u)

        first = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)

        assert first.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert first.counts == {"UserRole": 1, "SemesterStudent": 1}
        assert await seed.is_deleted(enrol_s1)
        assert not await seed.is_deleted(student)

        second = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s2.id)

        assert second.outcome is LifecycleOutcome.DELETED
        assert second.counts == {
            "UserRole": 1,
            "SemesterStudent": 1,
            "Student": 1,
            "RefreshToken": 1,
            "User": 1,
        }
        assert await seed.deleted_map(enrol_s2, student, token, u) == {
            row.id: True for row in (enrol_s2, student, token, u)
        }

    async def test_system_wide_role_keeps_principal(self, seed, coordinator):
        u = await seed.user()
        s1 = await seed.semester()
        await seed.assign(u, "mentor", s1)
        dean = await seed.assign(u, "dean")

        result = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)

        assert result.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert not await seed.is_deleted(dean)
        assert not await seed.is_deleted(u)


class TestUnscopedDelete:
    async def test_principal_and_all_dependents(self, seed, coordinator, session_factory):
        u = await seed.user()
        other = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        roles = [await seed.assign(u, "mentor", s1), await seed.assign(u, "lecturer")]
        topics = [await seed.topic(s1, u), await seed.topic(s2, other, supervisor=u)]
        g = await seed.group(s1)
        membership = await seed.member(g, u)
        mentoring = await seed.mentor(g, u)
        student = await seed.student(u)
        enrol = await seed.enroll(student, s1)
        loose_doc = await seed.document(u)
        token = await seed.refresh_token(u)
        other_topic = await seed.topic(s1, other, sub_supervisor=u)

        result = await coordinator.cascade_soft_delete(EntityType.USER, u.id, "admin-id")

        assert result.outcome is LifecycleOutcome.DELETED
        assert result.root_deleted
        assert result.counts == {
            "UserRole": 2,
            "RefreshToken": 1,
            "Student": 1,
            "SemesterStudent": 1,
            "Topic": 2,
            "GroupMember": 1,
            "GroupMentor": 1,
            "Document": 1,
            "User": 1,
        }
        deleted = (u, *roles, *topics, membership, mentoring, student, enrol, loose_doc, token)
        assert await seed.deleted_map(*deleted) == {row.id: True for row in deleted}
        # sub_supervisor is not followed; group and semester are not owned by the principal.
        assert await seed.deleted_map(other_topic, g, s1, other) == {
            row.id: False for row in (other_topic, g, s1, other)
        }
        assert await _orphans(session_factory) == []

    async def test_semester_cascade(self, seed, coordinator, session_factory):
        u = await seed.user()
        s, other_semester = await seed.semester(), await seed.semester()
        role = await seed.assign(u, "mentor", s)
        t = await seed.topic(s, u)
        g = await seed.group(s)
        rows = [
            role,
            t,
            g,
            await seed.topic_assignment(t, g, u),
            await seed.document(u, t),
            await seed.member(g, u),
            await seed.mentor(g, u),
            await seed.progress_report(g),
            (meeting := await seed.meeting(g)),
            await seed.feedback(meeting),
            await seed.enroll(await seed.student(u), s),
        ]
        kept_topic = await seed.topic(other_semester, u)

        result = await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, None)

        assert result.outcome is LifecycleOutcome.DELETED
        assert result.counts["Semester"] == 1
        assert result.counts["Feedback"] == 1
        assert result.total == len(rows) + 1
        assert await seed.deleted_map(s, *rows) == {row.id: True for row in (s, *rows)}
        assert not await seed.is_deleted(u)
        assert not await seed.is_deleted(kept_topic)
        assert await _orphans(session_factory) == []

    async def test_semester_scope_equal_to_root_is_accepted(self, seed, coordinator):
        s = await seed.semester()
        result = await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, None, s.id)
        assert result.outcome is LifecycleOutcome.DELETED

    async def test_topic_scope_matching_its_semester(self, seed, coordinator):
        u = await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, u)
        doc = await seed.document(u, t)

        result = await coordinator.cascade_soft_delete(EntityType.TOPIC, t.id, u.id, s.id)

        assert result.outcome is LifecycleOutcome.DELETED
        assert result.counts == {"Document": 1, "Topic": 1}
        assert await seed.is_deleted(doc)


class TestCouncilCascade:
    async def test_semester_delete_reaches_councils_and_defenses(
        self, seed, coordinator, session_factory
    ):
        officer, lecturer, reviewer = await seed.user(), await seed.user(), await seed.user()
        student = await seed.student(await seed.user())
        s = await seed.semester()
        t = await seed.topic(s, lecturer)
        g = await seed.group(s)
        period = await seed.submission_period(s, officer)
        c = await seed.council(s, period=period)
        review = await seed.review_schedule(c, g, t)
        defense = await seed.defense_schedule(c, g)
        rows = [
            t,
            g,
            period,
            c,
            review,
            defense,
            await seed.council_member(c, reviewer),
            await seed.review_assignment(c, t, reviewer=reviewer, schedule=review),
            await seed.defense_result(defense, student),
            await seed.decision(officer, s),
        ]

        deleted = await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, officer.id)

        assert deleted.outcome is LifecycleOutcome.DELETED
        assert deleted.counts == {
            "Semester": 1,
            "Topic": 1,
            "Group": 1,
            "SubmissionPeriod": 1,
            "Council": 1,
            "CouncilMember": 1,
            "ReviewSchedule": 1,
            "ReviewAssignment": 1,
            "DefenseSchedule": 1,
            "DefenseMemberResult": 1,
            "Decision": 1,
        }
        assert await seed.deleted_map(*rows) == {row.id: True for row in rows}
        people = (officer, lecturer, reviewer, student)
        assert await seed.deleted_map(*people) == {row.id: False for row in people}
        assert await _orphans(session_factory) == []

        restored = await coordinator.restore(EntityType.SEMESTER, s.id, officer.id)

        assert restored.counts == deleted.counts
        assert restored.skipped == {}
        assert await seed.deleted_map(*rows) == {row.id: False for row in rows}

    async def test_principal_delete_retracts_council_work(
        self, seed, coordinator, session_factory
    ):
        u, lecturer = await seed.user(), await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, lecturer)
        g = await seed.group(s)
        c = await seed.council(s)
        review = await seed.review_schedule(c, g, t)
        report = await seed.progress_report(g)
        period = await seed.submission_period(s, u)
        # Only linked to the period; the reference is not followed.
        later_council = await seed.council(s, period=period)
        retracted = [
            await seed.council_member(c, u),
            await seed.review_assignment(c, t, reviewer=u, schedule=review),
            await seed.report_mentor(report, u),
            await seed.mentor(g, lecturer, added_by=u),
            period,
            await seed.decision(u),
        ]

        result = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None)

        assert result.outcome is LifecycleOutcome.DELETED
        assert result.counts == {
            "User": 1,
            "CouncilMember": 1,
            "ReviewAssignment": 1,
            "ProgressReportMentor": 1,
            "GroupMentor": 1,
            "SubmissionPeriod": 1,
            "Decision": 1,
        }
        assert await seed.deleted_map(*retracted) == {row.id: True for row in retracted}
        kept = (c, later_council, review, report, t, g, lecturer)
        assert await seed.deleted_map(*kept) == {row.id: False for row in kept}
        assert await _orphans(session_factory) == []

    async def test_scoped_delete_leaves_other_semester_councils(self, seed, coordinator):
        u = await seed.user()
        student = await seed.student(u)
        s1, s2 = await seed.semester(), await seed.semester()
        await seed.assign(u, "student", s1)
        await seed.assign(u, "student", s2)
        await seed.enroll(student, s1)
        await seed.enroll(student, s2)
        c1, c2 = await seed.council(s1), await seed.council(s2)
        d1 = await seed.defense_schedule(c1, await seed.group(s1))
        d2 = await seed.defense_schedule(c2, await seed.group(s2))
        result_s1 = await seed.defense_result(d1, student)
        result_s2 = await seed.defense_result(d2, student)
        member_s1 = await seed.council_member(c1, u)
        member_s2 = await seed.council_member(c2, u)

        result = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)

        assert result.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert result.counts == {
            "UserRole": 1,
            "SemesterStudent": 1,
            "DefenseMemberResult": 1,
            "CouncilMember": 1,
        }
        assert await seed.deleted_map(result_s1, member_s1) == {
            result_s1.id: True,
            member_s1.id: True,
        }
        kept = (u, student, d1, c1, result_s2, member_s2)
        assert await seed.deleted_map(*kept) == {row.id: False for row in kept}


class TestIdempotence:
    async def test_second_delete_is_already_in_state(self, seed, coordinator):
        u = await seed.user()
        await seed.refresh_token(u)

        first = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None)
        second = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None)

        assert first.outcome is LifecycleOutcome.DELETED
        assert second.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert second.counts == {}
        assert len(await seed.audit_entries("DELETE_USER")) == 1

    async def test_repeated_scoped_delete_is_already_in_state(self, seed, coordinator):
        u = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        role_s1 = await seed.assign(u, "mentor", s1)
        role_s2 = await seed.assign(u, "mentor", s2)

        first = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)
        second = await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)

        assert first.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert first.counts == {"UserRole": 1}
        assert second.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert second.counts == {}
        assert not second.root_deleted
        assert await seed.deleted_map(u, role_s1, role_s2) == {
            u.id: False,
            role_s1.id: True,
            role_s2.id: False,
        }
        assert len(await seed.audit_entries("DELETE_USER")) == 1

    async def test_repeated_scoped_bulk_delete_is_already_in_state(self, seed, coordinator):
        u = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        await seed.assign(u, "mentor", s1)
        await seed.assign(u, "mentor", s2)

        first = await coordinator.soft_delete_all_principals(None, s1.id)
        second = await coordinator.soft_delete_all_principals(None, s1.id)

        assert first.outcome is LifecycleOutcome.PARTIALLY_DELETED
        assert first.principal_ids == (u.id,)
        assert second.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert second.principal_ids == ()
        assert len(await seed.audit_entries("DELETE_ALL_USERS")) == 1

    async def test_restore_of_active_root_is_already_in_state(self, seed, coordinator):
        s = await seed.semester()
        result = await coordinator.restore(EntityType.SEMESTER, s.id)
        assert result.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert await seed.audit_entries("RESTORE_SEMESTER") == []


class TestPreconditions:
    async def test_block_aborts_with_nothing_changed(self, seed, coordinator):
        lecturer, student = await seed.user(), await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, lecturer)
        doc = await seed.document(lecturer, t)
        registration = await seed.registration(t, student)

        with pytest.raises(BlockedByActiveChildrenException) as excinfo:
            await coordinator.cascade_soft_delete(EntityType.TOPIC, t.id, "admin-id")

        assert excinfo.value.details == {
            "entity_type": "TopicRegistration",
            "parent_type": "Topic",
            "count": 1,
        }
        assert await seed.deleted_map(t, doc, registration) == {
            row.id: False for row in (t, doc, registration)
        }
        [attempt] = await seed.audit_entries("DELETE_TOPIC_ATTEMPT")
        assert attempt.severity == "WARNING"
        assert attempt.user_id == "admin-id"
        assert attempt.metadata_["error_code"] == "BLOCKED_BY_ACTIVE_CHILDREN"
        assert await seed.audit_entries("DELETE_TOPIC") == []

    async def test_block_reached_through_principal(self, seed, coordinator):
        lecturer, student = await seed.user(), await seed.user()
        t = await seed.topic(await seed.semester(), lecturer)
        await seed.registration(t, student)
        token = await seed.refresh_token(lecturer)

        with pytest.raises(BlockedByActiveChildrenException):
            await coordinator.cascade_soft_delete(EntityType.USER, lecturer.id, None)

        assert await seed.deleted_map(lecturer, t, token) == {
            row.id: False for row in (lecturer, t, token)
        }

    async def test_registrations_of_deleted_principal_do_not_block(self, seed, coordinator):
        lecturer, student = await seed.user(), await seed.user()
        t = await seed.topic(await seed.semester(), lecturer)
        registration = await seed.registration(t, student)

        await coordinator.cascade_soft_delete(EntityType.USER, student.id, None)
        result = await coordinator.cascade_soft_delete(EntityType.TOPIC, t.id, None)

        assert await seed.is_deleted(registration)
        assert result.outcome is LifecycleOutcome.DELETED

    async def test_protected_principal(self, seed, coordinator):
        admin = await seed.user()
        await seed.assign(admin, "admin")
        token = await seed.refresh_token(admin)

        with pytest.raises(ProtectedEntityException) as excinfo:
            await coordinator.cascade_soft_delete(EntityType.USER, admin.id, "other-admin")

        assert excinfo.value.details["roles"] == ["admin"]
        assert not await seed.is_deleted(admin)
        assert not await seed.is_deleted(token)
        [attempt] = await seed.audit_entries("DELETE_USER_ATTEMPT")
        assert attempt.severity == "ERROR"

    async def test_missing_root(self, seed, coordinator):
        with pytest.raises(ResourceNotFoundException):
            await coordinator.cascade_soft_delete(EntityType.USER, "missing", None)
        [attempt] = await seed.audit_entries("DELETE_USER_ATTEMPT")
        assert attempt.entity_id == "missing"
        assert attempt.severity == "WARNING"

    async def test_non_root_type_is_rejected(self, coordinator):
        with pytest.raises(ValidationException):
            await coordinator.cascade_soft_delete(EntityType.GROUP, "g1", None)

    async def test_scope_semester_deleted(self, seed, coordinator):
        u = await seed.user()
        s = await seed.semester()
        await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, None)

        with pytest.raises(ScopeConflictException):
            await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s.id)
        assert not await seed.is_deleted(u)

    async def test_scope_semester_missing(self, seed, coordinator):
        u = await seed.user()
        with pytest.raises(ScopeConflictException):
            await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, "no-such-semester")

    async def test_scope_must_match_semester_root(self, seed, coordinator):
        s1, s2 = await seed.semester(), await seed.semester()
        with pytest.raises(ScopeConflictException):
            await coordinator.cascade_soft_delete(EntityType.SEMESTER, s1.id, None, s2.id)
        assert not await seed.is_deleted(s1)

    async def test_scope_must_match_topic_semester(self, seed, coordinator):
        u = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        t = await seed.topic(s1, u)
        with pytest.raises(ScopeConflictException):
            await coordinator.cascade_soft_delete(EntityType.TOPIC, t.id, None, s2.id)
        assert not await seed.is_deleted(t)


class TestTransactionFailure:
    async def test_store_fault_rolls_back_everything(self, seed, coordinator, monkeypatch):
        u = await seed.user()
        role = await seed.assign(u, "lecturer")
        token = await seed.refresh_token(u)
        calls = {"n": 0}
        original = LifecycleRepository.set_deleted

        async def flaky(self, entity_type, ids, deleted):
            calls["n"] += 1
            if calls["n"] == 2:
                raise OperationalError("UPDATE", {}, Exception("disk I/O error"))
            return await original(self, entity_type, ids, deleted)

        monkeypatch.setattr(LifecycleRepository, "set_deleted", flaky)

        with pytest.raises(TransactionFailureException) as excinfo:
            await coordinator.cascade_soft_delete(EntityType.USER, u.id, None)

        assert excinfo.value.retryable
        assert await seed.deleted_map(u, role, token) == {
            row.id: False for row in (u, role, token)
        }
        [attempt] = await seed.audit_entries("DELETE_USER_ATTEMPT")
        assert attempt.severity == "ERROR"
        assert await seed.audit_entries("DELETE_USER") == []


class TestRestore:
    async def test_scoped_removal_is_not_undone_by_restore(self, seed, coordinator):
        u = await seed.user()
        s1, s2 = await seed.semester(), await seed.semester()
        role_s1 = await seed.assign(u, "mentor", s1)
        await seed.assign(u, "mentor", s2)
        await coordinator.cascade_soft_delete(EntityType.USER, u.id, None, s1.id)

        result = await coordinator.restore(EntityType.USER, u.id)

        assert result.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert await seed.is_deleted(role_s1)

    async def test_restore_revives_dependents_deleted_before_the_cascade(
        self, seed, coordinator
    ):
        u = await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, u)
        await coordinator.cascade_soft_delete(EntityType.TOPIC, t.id, None)
        await coordinator.cascade_soft_delete(EntityType.USER, u.id, None)

        result = await coordinator.restore(EntityType.USER, u.id)

        assert result.counts == {"User": 1, "Topic": 1}
        assert not await seed.is_deleted(t)

    async def test_restore_semester_brings_back_cascade(self, seed, coordinator):
        u = await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, u)
        g = await seed.group(s)
        feedback = await seed.feedback(await seed.meeting(g))
        deleted = await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, None)

        result = await coordinator.restore(EntityType.SEMESTER, s.id, "admin-id")

        assert result.outcome is LifecycleOutcome.RESTORED
        assert result.counts == deleted.counts
        assert result.skipped == {}
        assert await seed.deleted_map(s, t, g, feedback) == {
            row.id: False for row in (s, t, g, feedback)
        }
        [entry] = await seed.audit_entries("RESTORE_SEMESTER")
        assert entry.user_id == "admin-id"

    async def test_child_with_another_deleted_parent_stays_deleted(self, seed, coordinator):
        author, uploader = await seed.user(), await seed.user()
        t = await seed.topic(await seed.semester(), author)
        doc = await seed.document(uploader, t)
        await coordinator.cascade_soft_delete(EntityType.USER, author.id, None)
        await coordinator.cascade_soft_delete(EntityType.USER, uploader.id, None)

        result = await coordinator.restore(EntityType.USER, author.id)

        assert result.counts == {"User": 1, "Topic": 1}
        assert result.skipped == {"Document": 1}
        assert not await seed.is_deleted(t)
        assert await seed.is_deleted(doc)

    async def test_root_with_deleted_parent(self, seed, coordinator):
        u = await seed.user()
        s = await seed.semester()
        t = await seed.topic(s, u)
        await coordinator.cascade_soft_delete(EntityType.SEMESTER, s.id, None)

        with pytest.raises(ParentDeletedException) as excinfo:
            await coordinator.restore(EntityType.TOPIC, t.id, u.id)

        assert excinfo.value.details["parent_type"] == "Semester"
        assert await seed.is_deleted(t)
        [attempt] = await seed.audit_entries("RESTORE_TOPIC_ATTEMPT")
        assert attempt.severity == "WARNING"


class TestBulkDelete:
    async def test_skips_protected_principals(self, seed, coordinator):
        admin = await seed.user()
        await seed.assign(admin, "admin")
        officer = await seed.user()
        await seed.assign(officer, "academic_officer")
        lecturer, student = await seed.user(), await seed.user()
        await seed.assign(lecturer, "lecturer")
        await seed.refresh_token(student)

        result = await coordinator.soft_delete_all_principals(admin.id)

        assert result.outcome is LifecycleOutcome.DELETED
        assert set(result.principal_ids) == {lecturer.id, student.id}
        assert set(result.skipped_protected) == {admin.id, officer.id}
        assert result.deleted_principals == 2
        assert result.counts == {"User": 2, "UserRole": 1, "RefreshToken": 1}
        assert await seed.deleted_map(admin, officer) == {admin.id: False, officer.id: False}
        [entry] = await seed.audit_entries("DELETE_ALL_USERS")
        assert entry.user_id == admin.id
        assert sorted(entry.metadata_["skipped_protected"]) == sorted([admin.id, officer.id])

    async def test_block_aborts_whole_batch(self, seed, coordinator):
        lecturer, student, admin = await seed.user(), await seed.user(), await seed.user()
        await seed.assign(admin, "admin")
        t = await seed.topic(await seed.semester(), lecturer)
        # Protected principals are skipped, so this registration stays active.
        await seed.registration(t, admin)
        await seed.assign(student, "student", await seed.semester())

        with pytest.raises(BlockedByActiveChildrenException):
            await coordinator.soft_delete_all_principals(None)

        assert await seed.deleted_map(lecturer, student, t) == {
            row.id: False for row in (lecturer, student, t)
        }
        [attempt] = await seed.audit_entries("DELETE_ALL_USERS_ATTEMPT")
        assert attempt.severity == "WARNING"

    async def test_nothing_to_delete(self, seed, coordinator):
        admin = await seed.user()
        await seed.assign(admin, "admin")

        result = await coordinator.soft_delete_all_principals(admin.id)

        assert result.outcome is LifecycleOutcome.ALREADY_IN_STATE
        assert await seed.audit_entries("DELETE_ALL_USERS") == []


class TestSummaryAudit:
    async def test_summary_record_snapshots_root_without_secrets(self, seed, coordinator):
        u = await seed.user("carol")
        await seed.refresh_token(u)

        await coordinator.cascade_soft_delete(EntityType.USER, u.id, "admin-id")

        [entry] = await seed.audit_entries("DELETE_USER")
        assert entry.entity_type == "User"
        assert entry.entity_id == u.id
        assert entry.severity == "INFO"
        assert entry.metadata_["outcome"] == "deleted"
        assert entry.metadata_["counts"] == {"RefreshToken": 1, "User": 1}
        assert entry.old_values["username"] == "carol"
        assert entry.old_values["is_deleted"] is False
        assert entry.old_values["password_hash"] == "[REDACTED]"
