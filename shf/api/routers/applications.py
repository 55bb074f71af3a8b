from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import shf.services.application as application_service
from shf.api.deps import get_db, require_roles
from shf.db.models.user import User
from shf.repositories.role import ADMIN
from shf.schemas.application import Application, ApplicationStateUpdate

router = APIRouter(prefix="/applications", tags=["applications"])


@router.patch("/{application_id}", response_model=Application)
def change_state(
    application_id: int,
    data: ApplicationStateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    """Move an application to another state. Only admin users can review applications."""
    application = application_service.change_application_state(db, application_id, data.state)
    return Application.model_validate(application)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application_by_id(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    application_service.delete_application(db, application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
