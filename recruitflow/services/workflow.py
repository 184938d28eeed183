"""
Status transition rules for job positions and CV applications.

Every status write goes through this module. A transition is allowed only
when the (from, to) pair appears in the table below AND the acting role
is listed for it. Same-status writes are not transitions and always pass.

SYSTEM is the actor used for automated steps (the CV analysis callback).
"""

import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Tuple

from recruitflow.models.cv_application import ApplicationStatus
from recruitflow.models.job_position import JobPositionStatus
from recruitflow.models.user import UserRole

logger = logging.getLogger(__name__)

SYSTEM = "system"

HEAD_HR = UserRole.HEAD_HR.value
STAFF_HR = UserRole.STAFF_HR.value
MANAGER = UserRole.MANAGER.value

Transitions = Dict[Tuple[str, str], FrozenSet[str]]


class WorkflowError(Exception):
    """Base class for rejected status writes."""


class UnknownStatusError(WorkflowError):
    """Status value is not part of the lifecycle."""


class InvalidTransitionError(WorkflowError):
    """The (from, to) pair is not an allowed move."""


class TransitionNotPermittedError(WorkflowError):
    """The move exists but the acting role may not perform it."""


JOB_POSITION_TRANSITIONS: Transitions = {
    (JobPositionStatus.DRAFT.value, JobPositionStatus.APPROVED.value): frozenset({HEAD_HR}),
    (JobPositionStatus.DRAFT.value, JobPositionStatus.REJECTED.value): frozenset({HEAD_HR}),
    (JobPositionStatus.APPROVED.value, JobPositionStatus.OPEN.value): frozenset({STAFF_HR, HEAD_HR}),
    (JobPositionStatus.OPEN.value, JobPositionStatus.CLOSED.value): frozenset({STAFF_HR, HEAD_HR}),
}

APPLICATION_TRANSITIONS: Transitions = {
    (ApplicationStatus.SUBMITTED.value, ApplicationStatus.REVIEWED.value): frozenset({SYSTEM}),
    (ApplicationStatus.REVIEWED.value, ApplicationStatus.STAFF_APPROVED.value): frozenset({STAFF_HR}),
    (ApplicationStatus.REVIEWED.value, ApplicationStatus.STAFF_REJECTED.value): frozenset({STAFF_HR}),
    (ApplicationStatus.STAFF_APPROVED.value, ApplicationStatus.INTERVIEW_QUEUED.value): frozenset({STAFF_HR}),
    (ApplicationStatus.INTERVIEW_QUEUED.value, ApplicationStatus.INTERVIEW_SCHEDULED.value): frozenset({STAFF_HR}),
    (ApplicationStatus.INTERVIEW_SCHEDULED.value, ApplicationStatus.PENDING_FINAL_DECISION.value): frozenset({MANAGER}),
    (ApplicationStatus.INTERVIEW_SCHEDULED.value, ApplicationStatus.STAFF_REJECTED.value): frozenset({MANAGER}),
    (ApplicationStatus.PENDING_FINAL_DECISION.value, ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value): frozenset({STAFF_HR, HEAD_HR}),
    (ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value, ApplicationStatus.HIRED.value): frozenset({HEAD_HR}),
    (ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value, ApplicationStatus.NOT_HIRED.value): frozenset({HEAD_HR}),
    (ApplicationStatus.HIRED.value, ApplicationStatus.ONBOARDING.value): frozenset({STAFF_HR}),
}

# Applications in these states are finished and may be archived
TERMINAL_APPLICATION_STATUSES = frozenset({
    ApplicationStatus.STAFF_REJECTED.value,
    ApplicationStatus.NOT_HIRED.value,
    ApplicationStatus.ONBOARDING.value,
})

# Manager feedback ("Hire"/"Reject") and Head HR decision values
MANAGER_DECISIONS = {
    "Hire": ApplicationStatus.PENDING_FINAL_DECISION.value,
    "Reject": ApplicationStatus.STAFF_REJECTED.value,
}
FINAL_DECISIONS = {
    "HIRED": ApplicationStatus.HIRED.value,
    "NOT_HIRED": ApplicationStatus.NOT_HIRED.value,
}

# trigger-schedule type -> (required current status, resulting status)
SCHEDULE_TYPES = {
    "manager": (ApplicationStatus.INTERVIEW_QUEUED.value, ApplicationStatus.INTERVIEW_SCHEDULED.value),
    "final_hr": (ApplicationStatus.PENDING_FINAL_DECISION.value, ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value),
    "onboarding": (ApplicationStatus.HIRED.value, ApplicationStatus.ONBOARDING.value),
}


def _check(
    transitions: Transitions,
    valid: FrozenSet[str],
    entity: str,
    current: str,
    target: str,
    actor: str
) -> None:
    if target not in valid:
        raise UnknownStatusError(f"Invalid {entity} status: {target}")
    if current == target:
        return

    allowed_roles = transitions.get((current, target))
    if allowed_roles is None:
        raise InvalidTransitionError(
            f"Cannot move {entity} from {current} to {target}"
        )
    if actor not in allowed_roles:
        raise TransitionNotPermittedError(
            f"Role '{actor}' may not move {entity} from {current} to {target}"
        )

    logger.debug(f"{entity} transition {current} -> {target} by {actor}")


def check_job_position_transition(current: str, target: str, actor: str) -> None:
    """
    Validate a job position status change.

    Raises:
        UnknownStatusError: target is not a job position status
        InvalidTransitionError: the move is not in the table
        TransitionNotPermittedError: actor's role may not make the move
    """
    valid = frozenset(s.value for s in JobPositionStatus)
    _check(JOB_POSITION_TRANSITIONS, valid, "job position", current, target, actor)


def check_application_transition(current: str, target: str, actor: str) -> None:
    """
    Validate a CV application status change.

    Raises:
        UnknownStatusError: target is not an application status
        InvalidTransitionError: the move is not in the table
        TransitionNotPermittedError: actor's role may not make the move
    """
    valid = frozenset(s.value for s in ApplicationStatus)
    _check(APPLICATION_TRANSITIONS, valid, "application", current, target, actor)


def allowed_application_targets(current: str, actor: str) -> list:
    """Statuses the actor may move an application to from its current status."""
    return sorted(
        target
        for (source, target), roles in APPLICATION_TRANSITIONS.items()
        if source == current and actor in roles
    )


def derive_status_from_notes(current: str, notes: Optional[dict]) -> Optional[str]:
    """
    Work out the next status from decision notes when the caller sent none.

    A manager's "Hire"/"Reject" after the interview, or Head HR's
    "HIRED"/"NOT_HIRED" after the final interview, implies the target status.

    Returns:
        The implied status, or None when the notes imply no move
    """
    if not notes:
        return None

    if current == ApplicationStatus.INTERVIEW_SCHEDULED.value and notes.get("manager_decision"):
        return MANAGER_DECISIONS.get(notes["manager_decision"])

    if current == ApplicationStatus.FINAL_INTERVIEW_SCHEDULED.value and notes.get("final_decision"):
        return FINAL_DECISIONS.get(notes["final_decision"])

    return None


def merge_interview_notes(existing: Optional[dict], updates: Optional[dict]) -> dict:
    """Overlay new note keys onto the stored notes and return a new dict."""
    merged = dict(existing or {})
    merged.update(updates or {})
    return merged


def stamp_decision_date(updates: Optional[dict], now: Optional[datetime] = None) -> dict:
    """
    Date a decision carried by incoming note updates.

    Applied to the updates before merging, so a later decision (Head HR's
    final_decision after the manager's Hire) replaces the stored date.
    An explicit decision_date in the updates is kept.
    """
    updates = dict(updates or {})
    has_decision = updates.get("manager_decision") or updates.get("final_decision")
    if has_decision and not updates.get("decision_date"):
        updates["decision_date"] = (now or datetime.utcnow()).isoformat()
    return updates
