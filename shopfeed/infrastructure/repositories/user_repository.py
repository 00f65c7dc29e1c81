"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from shopfeed.domain.entities import User
from shopfeed.infrastructure.models import UserModel

from .base import SessionRepository


class UserRepository(SessionRepository):
    """Provide read access and seeding for users."""

    store_name = "user store"

    def get(self, user_id: str) -> User | None:
        with self._store_errors():
            model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def list_active(self) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.name)
        )
        with self._store_errors():
            models = query.all()
        return [self._to_entity(model) for model in models]

    def list_team(self, leader_id: str) -> Sequence[User]:
        """Return active users whose leader is ``leader_id``."""

        query = (
            self.session.query(UserModel)
            .filter(UserModel.leader_id == leader_id)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.name)
        )
        with self._store_errors():
            models = query.all()
        return [self._to_entity(model) for model in models]

    def get_map_by_ids(self, user_ids: Iterable[str]) -> dict[str, User]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        with self._store_errors():
            models = self.session.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            leader_id=user.leader_id,
            is_active=user.is_active,
        )
        with self._store_errors():
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            leader_id=model.leader_id,
            is_active=bool(model.is_active),
        )


__all__ = ["UserRepository"]
