from pydantic import BaseModel, ConfigDict

from shf.domain.application_state import ApplicationState


class Application(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_id: int
    state: ApplicationState


class ApplicationStateUpdate(BaseModel):
    state: ApplicationState
