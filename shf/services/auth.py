"""Auth service: login."""

from sqlalchemy.orm import Session

from shf.core.security import create_access_token, verify_password
from shf.errors import UnauthorizedError
from shf.repositories.user import get_user_by_email
from shf.schemas.user import Token, User


def login(db: Session, email: str, password: str) -> Token:
    """
    Authenticate user by email and password, return JWT access token.

    Raises:
        UnauthorizedError: If email not found or password incorrect.
    """
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Incorrect email or password")

    access_token = create_access_token(data={"sub": user.id})
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=User.model_validate(user),
    )
