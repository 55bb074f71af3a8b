from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from shf.core.security import decode_token
from shf.db.base import SessionLocal
from shf.db.models.user import User
from shf.repositories.user import get_user_by_id
from shf.services.event_importer import EventsImporter
from shf.services.url_shortener import UrlShortener

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_events_importer() -> EventsImporter:
    return EventsImporter()


def get_url_shortener() -> UrlShortener:
    return UrlShortener()


def _user_from_token(token: str, db: Session) -> User:
    payload = decode_token(token)
    if payload is None:
        raise _CREDENTIALS_EXCEPTION

    # Validate token type - must be "access" token
    if payload.get("type") != "access":
        raise _CREDENTIALS_EXCEPTION

    sub = payload.get("sub")
    if sub is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise _CREDENTIALS_EXCEPTION

    user = get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from JWT token."""
    return _user_from_token(token, db)


def get_optional_user(
    token: str | None = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    """Get the current user if a token was sent; anonymous visitors get None."""
    if token is None:
        return None
    return _user_from_token(token, db)


def require_roles(*role_names: str):
    """
    Create a dependency that requires the current user to have one of the specified roles.

    Example:
        Depends(require_roles("admin"))
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role.name not in role_names:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return current_user

    return role_checker
