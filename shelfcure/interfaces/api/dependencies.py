"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from shelfcure.domain.entities import User
from shelfcure.infrastructure.database import get_db
from shelfcure.infrastructure.repositories import UserRepository
from shelfcure.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    email: str | None = payload.get("sub")
    if not isinstance(email, str) or not email:
        raise _credentials_exception()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_exception("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def can_access_store(user: User, store_id: int) -> bool:
    """Return ``True`` when ``user`` may read or subscribe to ``store_id``."""

    return user.is_admin() or user.store_id == store_id


def get_current_store_id(
    current_user: User = Depends(get_current_active_user),
    store_id: int | None = Query(
        default=None, description="Store to act on; only needed by admins without a store"
    ),
) -> int:
    """Return the store the request is scoped to."""

    if store_id is not None:
        if not can_access_store(current_user, store_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized for this store",
            )
        return store_id
    if current_user.store_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Store ID is required",
        )
    return current_user.store_id
