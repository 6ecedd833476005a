"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from shelfcure.domain.entities import User
from shelfcure.infrastructure.models import UserModel
from shelfcure.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class UserRepository:
    """Provide the user operations needed by authentication."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        model.created_at = ensure_app_naive_datetime(user.created_at or now_in_app_timezone())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def record_login(self, user_id: int) -> None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            return
        model.last_login = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.store_id = user.store_id
        model.name = user.name
        model.email = user.email.strip().lower()
        model.password = user.password
        model.role = user.role
        model.is_active = user.is_active
        model.last_login = ensure_app_naive_datetime(user.last_login)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            store_id=model.store_id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            is_active=model.is_active,
            last_login=ensure_app_timezone(model.last_login),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
