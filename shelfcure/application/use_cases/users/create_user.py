"""Use cases for creating stores and their staff accounts."""

from sqlalchemy.orm import Session

from shelfcure.domain.entities import ROLE_ADMIN, ROLE_STORE_MANAGER, ROLE_STORE_OWNER, Store, User
from shelfcure.infrastructure.repositories import StoreRepository, UserRepository
from shelfcure.infrastructure.security import get_password_hash

_ROLES = (ROLE_ADMIN, ROLE_STORE_OWNER, ROLE_STORE_MANAGER)


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_STORE_MANAGER,
    store_id: int | None = None,
) -> User:
    """Create a new account with a hashed password."""

    if role not in _ROLES:
        raise ValueError(f"Unsupported role '{role}'")
    if role != ROLE_ADMIN and store_id is None:
        raise ValueError("Store staff must belong to a store")
    if len(password) < 6:
        raise ValueError("Password must be at least 6 characters long")

    repository = UserRepository(session)
    if repository.get_by_email(email) is not None:
        raise ValueError("A user with that email already exists")

    user = User(
        id=None,
        store_id=store_id,
        name=name.strip(),
        email=email,
        password=get_password_hash(password),
        role=role,
        is_active=True,
        last_login=None,
        created_at=None,
    )
    return repository.create(user)


def create_store(session: Session, *, name: str) -> Store:
    """Register a new active store."""

    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Store name is required")
    return StoreRepository(session).create(
        Store(id=None, name=cleaned, is_active=True, created_at=None)
    )
