from datetime import date

from pydantic import BaseModel, ConfigDict


class Role(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    member: bool
    membership_start_date: date | None = None
    membership_expire_date: date | None = None
    role: Role


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
