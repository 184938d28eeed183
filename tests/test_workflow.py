"""
Unit tests for the status transition rules.

Tests:
- Job position lifecycle and who may drive it
- CV application pipeline, including rejected skips and wrong roles
- Decision notes that imply a status
- Interview note merging
"""

from datetime import datetime

import pytest

from recruitflow.models.cv_application import ApplicationStatus as A
from recruitflow.models.job_position import JobPositionStatus as P
from recruitflow.services import workflow
from recruitflow.services.workflow import (
    HEAD_HR,
    MANAGER,
    STAFF_HR,
    SYSTEM,
    InvalidTransitionError,
    TransitionNotPermittedError,
    UnknownStatusError,
)


class TestJobPositionTransitions:
    """DRAFT -> APPROVED/REJECTED -> OPEN -> CLOSED"""

    @pytest.mark.parametrize("current,target,actor", [
        (P.DRAFT, P.APPROVED, HEAD_HR),
        (P.DRAFT, P.REJECTED, HEAD_HR),
        (P.APPROVED, P.OPEN, STAFF_HR),
        (P.APPROVED, P.OPEN, HEAD_HR),
        (P.OPEN, P.CLOSED, STAFF_HR),
    ])
    def test_allowed_transitions(self, current, target, actor):
        workflow.check_job_position_transition(current.value, target.value, actor)

    @pytest.mark.parametrize("current,target", [
        (P.DRAFT, P.OPEN),
        (P.DRAFT, P.CLOSED),
        (P.APPROVED, P.CLOSED),
        (P.REJECTED, P.APPROVED),
        (P.OPEN, P.DRAFT),
        (P.CLOSED, P.OPEN),
    ])
    def test_other_moves_are_rejected(self, current, target):
        with pytest.raises(InvalidTransitionError):
            workflow.check_job_position_transition(current.value, target.value, HEAD_HR)

    def test_only_head_hr_approves(self):
        with pytest.raises(TransitionNotPermittedError):
            workflow.check_job_position_transition(P.DRAFT.value, P.APPROVED.value, STAFF_HR)
        with pytest.raises(TransitionNotPermittedError):
            workflow.check_job_position_transition(P.DRAFT.value, P.REJECTED.value, MANAGER)

    def test_manager_cannot_publish(self):
        with pytest.raises(TransitionNotPermittedError):
            workflow.check_job_position_transition(P.APPROVED.value, P.OPEN.value, MANAGER)

    def test_same_status_is_not_a_transition(self):
        workflow.check_job_position_transition(P.OPEN.value, P.OPEN.value, MANAGER)

    def test_unknown_status(self):
        with pytest.raises(UnknownStatusError):
            workflow.check_job_position_transition(P.DRAFT.value, "PUBLISHED", HEAD_HR)


class TestApplicationTransitions:
    """The candidate pipeline"""

    HAPPY_PATH = [
        (A.SUBMITTED, A.REVIEWED, SYSTEM),
        (A.REVIEWED, A.STAFF_APPROVED, STAFF_HR),
        (A.STAFF_APPROVED, A.INTERVIEW_QUEUED, STAFF_HR),
        (A.INTERVIEW_QUEUED, A.INTERVIEW_SCHEDULED, STAFF_HR),
        (A.INTERVIEW_SCHEDULED, A.PENDING_FINAL_DECISION, MANAGER),
        (A.PENDING_FINAL_DECISION, A.FINAL_INTERVIEW_SCHEDULED, HEAD_HR),
        (A.FINAL_INTERVIEW_SCHEDULED, A.HIRED, HEAD_HR),
        (A.HIRED, A.ONBOARDING, STAFF_HR),
    ]

    def test_full_pipeline_walk(self):
        status = A.SUBMITTED.value
        for current, target, actor in self.HAPPY_PATH:
            assert status == current.value
            workflow.check_application_transition(status, target.value, actor)
            status = target.value
        assert status == A.ONBOARDING.value

    @pytest.mark.parametrize("current,target,actor", [
        (A.REVIEWED, A.STAFF_REJECTED, STAFF_HR),
        (A.INTERVIEW_SCHEDULED, A.STAFF_REJECTED, MANAGER),
        (A.PENDING_FINAL_DECISION, A.FINAL_INTERVIEW_SCHEDULED, STAFF_HR),
        (A.FINAL_INTERVIEW_SCHEDULED, A.NOT_HIRED, HEAD_HR),
    ])
    def test_branches(self, current, target, actor):
        workflow.check_application_transition(current.value, target.value, actor)

    @pytest.mark.parametrize("current,target", [
        (A.SUBMITTED, A.STAFF_APPROVED),
        (A.SUBMITTED, A.HIRED),
        (A.REVIEWED, A.INTERVIEW_SCHEDULED),
        (A.STAFF_APPROVED, A.PENDING_FINAL_DECISION),
        (A.INTERVIEW_QUEUED, A.HIRED),
        (A.PENDING_FINAL_DECISION, A.HIRED),
        (A.STAFF_REJECTED, A.STAFF_APPROVED),
        (A.NOT_HIRED, A.HIRED),
        (A.ONBOARDING, A.HIRED),
        (A.HIRED, A.NOT_HIRED),
    ])
    def test_skips_and_reversals_are_rejected(self, current, target):
        for actor in (HEAD_HR, STAFF_HR, MANAGER, SYSTEM):
            with pytest.raises(InvalidTransitionError):
                workflow.check_application_transition(current.value, target.value, actor)

    @pytest.mark.parametrize("current,target,actor", [
        (A.SUBMITTED, A.REVIEWED, STAFF_HR),
        (A.REVIEWED, A.STAFF_APPROVED, MANAGER),
        (A.INTERVIEW_SCHEDULED, A.PENDING_FINAL_DECISION, STAFF_HR),
        (A.FINAL_INTERVIEW_SCHEDULED, A.HIRED, STAFF_HR),
        (A.FINAL_INTERVIEW_SCHEDULED, A.HIRED, MANAGER),
        (A.HIRED, A.ONBOARDING, MANAGER),
    ])
    def test_wrong_role_is_rejected(self, current, target, actor):
        with pytest.raises(TransitionNotPermittedError):
            workflow.check_application_transition(current.value, target.value, actor)

    def test_unknown_status(self):
        with pytest.raises(UnknownStatusError):
            workflow.check_application_transition(A.REVIEWED.value, "ACCEPTED", STAFF_HR)

    def test_allowed_targets_for_role(self):
        assert workflow.allowed_application_targets(A.REVIEWED.value, STAFF_HR) == [
            A.STAFF_APPROVED.value,
            A.STAFF_REJECTED.value,
        ]
        assert workflow.allowed_application_targets(A.REVIEWED.value, MANAGER) == []


class TestDecisionNotes:
    """Decision values in interview notes imply the next status"""

    def test_manager_hire(self):
        notes = {"manager_decision": "Hire", "manager_feedback": "Strong"}
        assert workflow.derive_status_from_notes(A.INTERVIEW_SCHEDULED.value, notes) == A.PENDING_FINAL_DECISION.value

    def test_manager_reject(self):
        notes = {"manager_decision": "Reject"}
        assert workflow.derive_status_from_notes(A.INTERVIEW_SCHEDULED.value, notes) == A.STAFF_REJECTED.value

    def test_final_decision(self):
        assert workflow.derive_status_from_notes(
            A.FINAL_INTERVIEW_SCHEDULED.value, {"final_decision": "NOT_HIRED"}
        ) == A.NOT_HIRED.value

    def test_decision_at_wrong_stage_implies_nothing(self):
        assert workflow.derive_status_from_notes(A.REVIEWED.value, {"manager_decision": "Hire"}) is None
        assert workflow.derive_status_from_notes(A.INTERVIEW_SCHEDULED.value, {"preference": "online"}) is None
        assert workflow.derive_status_from_notes(A.INTERVIEW_SCHEDULED.value, None) is None


class TestInterviewNotes:

    def test_merge_overlays_new_keys(self):
        existing = {"preference": "online", "scheduled_time": "2026-01-05T09:00:00"}
        merged = workflow.merge_interview_notes(existing, {"preference": "onsite", "manager_feedback": "Good"})

        assert merged == {
            "preference": "onsite",
            "scheduled_time": "2026-01-05T09:00:00",
            "manager_feedback": "Good",
        }
        # Stored notes are not mutated in place
        assert existing["preference"] == "online"

    def test_merge_from_empty(self):
        assert workflow.merge_interview_notes(None, {"a": 1}) == {"a": 1}
        assert workflow.merge_interview_notes({"a": 1}, None) == {"a": 1}

    def test_decision_date_stamped_on_new_decision(self):
        now = datetime(2030, 2, 1, 12, 0)
        stamped = workflow.stamp_decision_date({"final_decision": "HIRED"}, now=now)
        assert stamped["decision_date"] == "2030-02-01T12:00:00"

        kept = workflow.stamp_decision_date({"final_decision": "HIRED", "decision_date": "2026-01-01"})
        assert kept["decision_date"] == "2026-01-01"

        assert "decision_date" not in workflow.stamp_decision_date({"preference": "online"})

    def test_final_decision_replaces_manager_date(self):
        stored = {"manager_decision": "Hire", "decision_date": "2020-01-01T00:00:00"}
        updates = workflow.stamp_decision_date({"final_decision": "HIRED"}, now=datetime(2030, 2, 1))

        merged = workflow.merge_interview_notes(stored, updates)

        assert merged["manager_decision"] == "Hire"
        assert merged["decision_date"] == "2030-02-01T00:00:00"
