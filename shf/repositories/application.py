from sqlalchemy.orm import Session

from shf.db.models.application import Application as ApplicationModel
from shf.domain.application_state import ApplicationState


def get_application_by_id(db: Session, application_id: int) -> ApplicationModel | None:
    """Get an application by ID."""
    return db.query(ApplicationModel).filter(ApplicationModel.id == application_id).first()


def get_live_applications_by_company_id(db: Session, company_id: int) -> list[ApplicationModel]:
    """Get the applications for a company that are not in the middle of being destroyed.

    Always reads from the database, so applications already marked
    ``being_destroyed`` in this transaction are seen once flushed.
    """
    return (
        db.query(ApplicationModel)
        .filter(
            ApplicationModel.company_id == company_id,
            ApplicationModel.state != ApplicationState.BEING_DESTROYED.value,
        )
        .populate_existing()
        .all()
    )
