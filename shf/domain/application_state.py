from enum import Enum

from shf.errors import DomainValidationError


class ApplicationState(str, Enum):
    NEW = "new"
    UNDER_REVIEW = "under_review"
    WAITING_FOR_APPLICANT = "waiting_for_applicant"
    READY_FOR_REVIEW = "ready_for_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BEING_DESTROYED = "being_destroyed"


# Any state may move to BEING_DESTROYED; it is the last state an application
# holds before its row is deleted, and nothing leaves it.
_TRANSITIONS: dict[ApplicationState, frozenset[ApplicationState]] = {
    ApplicationState.NEW: frozenset({ApplicationState.UNDER_REVIEW}),
    ApplicationState.UNDER_REVIEW: frozenset(
        {
            ApplicationState.WAITING_FOR_APPLICANT,
            ApplicationState.ACCEPTED,
            ApplicationState.REJECTED,
        }
    ),
    ApplicationState.WAITING_FOR_APPLICANT: frozenset({ApplicationState.READY_FOR_REVIEW}),
    ApplicationState.READY_FOR_REVIEW: frozenset({ApplicationState.UNDER_REVIEW}),
    ApplicationState.ACCEPTED: frozenset({ApplicationState.REJECTED}),
    ApplicationState.REJECTED: frozenset({ApplicationState.ACCEPTED}),
    ApplicationState.BEING_DESTROYED: frozenset(),
}


def can_transition(current: ApplicationState, target: ApplicationState) -> bool:
    if target is ApplicationState.BEING_DESTROYED:
        return current is not ApplicationState.BEING_DESTROYED
    return target in _TRANSITIONS[current]


def ensure_transition(current: str, target: ApplicationState) -> ApplicationState:
    """Return ``target`` if an application in ``current`` may move to it."""
    current_state = ApplicationState(current)
    if not can_transition(current_state, target):
        raise DomainValidationError(
            f"Application cannot move from '{current_state.value}' to '{target.value}'"
        )
    return target
