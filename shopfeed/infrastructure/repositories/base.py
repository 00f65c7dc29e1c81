"""Shared session handling for the SQLAlchemy repositories."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shopfeed.domain.errors import InvalidArgument, TransientStoreFailure

logger = logging.getLogger(__name__)


class SessionRepository:
    """Base class that maps driver errors to domain errors.

    Integrity violations become :class:`InvalidArgument`; every other
    SQLAlchemy error rolls the session back and becomes
    :class:`TransientStoreFailure`, so callers never see driver exceptions.
    """

    store_name = "store"

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _store_errors(self) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            raise InvalidArgument("The request references unknown or duplicated rows") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("%s operation failed: %s", self.store_name.capitalize(), exc)
            raise TransientStoreFailure(f"The {self.store_name} is unavailable") from exc


__all__ = ["SessionRepository"]
