import logging

from sqlalchemy.orm import Session

import shf.repositories.application as application_repo
from shf.db.models.application import Application as ApplicationModel
from shf.domain.application_state import ApplicationState, ensure_transition
from shf.errors import NotFoundError

logger = logging.getLogger(__name__)


def change_application_state(db: Session, application_id: int, state: ApplicationState) -> ApplicationModel:
    """
    Move an application to a new state.

    Raises:
        NotFoundError: If the application doesn't exist
        DomainValidationError: If the transition is not allowed
    """
    application = application_repo.get_application_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")

    application.state = ensure_transition(application.state, state).value
    db.commit()
    db.refresh(application)
    return application


def delete_application(db: Session, application_id: int) -> None:
    """
    Delete an application.

    The application is first moved to ``being_destroyed`` and flushed, so
    anything checking the company's live applications during the same
    transaction no longer counts it.

    Raises:
        NotFoundError: If the application doesn't exist
    """
    application = application_repo.get_application_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")

    application.state = ensure_transition(application.state, ApplicationState.BEING_DESTROYED).value
    db.flush()

    db.delete(application)
    db.commit()
    logger.info("Deleted application %s", application_id)
