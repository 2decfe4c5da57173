# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Record store capability consumed by the access-control services.

Services never talk to SQLAlchemy directly; they receive a ``RecordStore``
so the core can run against the database in production and against a plain
in-memory fake in tests.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Protocol, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.exceptions import ConflictError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
Predicate = Callable[[Any], bool]


class RecordStore(Protocol):
    """Minimal record CRUD used by the services."""

    def get(self, model: type[ModelT], record_id: Any) -> ModelT | None: ...

    def find(
        self, model: type[ModelT], where: Predicate | None = None, **criteria: Any
    ) -> list[ModelT]: ...

    def first(
        self, model: type[ModelT], where: Predicate | None = None, **criteria: Any
    ) -> ModelT | None: ...

    def count(self, model: type[ModelT], **criteria: Any) -> int: ...

    def insert(self, record: ModelT) -> ModelT: ...

    def update(self, record: ModelT, **changes: Any) -> ModelT: ...

    def delete(self, record: Any) -> None: ...

    def transaction(self) -> AbstractContextManager[Any]: ...


class SqlAlchemyStore:
    """``RecordStore`` backed by a SQLAlchemy ORM session.

    Every mutating call commits on its own unless it runs inside
    ``transaction()``, which commits once at the end or rolls everything
    back on error. Unique constraint violations surface as ``ConflictError``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator["SqlAlchemyStore"]:
        if self._depth:
            yield self
            return
        self._depth += 1
        try:
            yield self
        except Exception:
            self.db.rollback()
            raise
        finally:
            self._depth -= 1
        self._save()

    def _save(self) -> None:
        try:
            if self._depth:
                self.db.flush()
            else:
                self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Write rejected by a constraint: {e.orig}")
            raise ConflictError() from e

    def get(self, model: type[ModelT], record_id: Any) -> ModelT | None:
        if record_id is None:
            return None
        return self.db.get(model, record_id)

    def find(
        self, model: type[ModelT], where: Predicate | None = None, **criteria: Any
    ) -> list[ModelT]:
        records = self.db.query(model).filter_by(**criteria).all()
        if where is not None:
            records = [record for record in records if where(record)]
        return records

    def first(
        self, model: type[ModelT], where: Predicate | None = None, **criteria: Any
    ) -> ModelT | None:
        if where is None:
            return self.db.query(model).filter_by(**criteria).first()
        matches = self.find(model, where, **criteria)
        return matches[0] if matches else None

    def count(self, model: type[ModelT], **criteria: Any) -> int:
        return self.db.query(model).filter_by(**criteria).count()

    def insert(self, record: ModelT) -> ModelT:
        self.db.add(record)
        self._save()
        self.db.refresh(record)
        return record

    def update(self, record: ModelT, **changes: Any) -> ModelT:
        for field, value in changes.items():
            setattr(record, field, value)
        self._save()
        self.db.refresh(record)
        return record

    def delete(self, record: Any) -> None:
        self.db.delete(record)
        self._save()
