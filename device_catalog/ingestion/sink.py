from __future__ import annotations

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..storage.database import DeviceStore
from ..storage.models import Device
from .results import CommitError, DeviceRecord, RowOutcome, RowResult, TransactionError

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_if_absent_statement(dialect: str):
    """Build the single insert used for a whole run; duplicates are ignored."""
    try:
        insert = _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise TransactionError(f"unsupported database dialect: {dialect}") from None
    return insert(Device.__table__).on_conflict_do_nothing(
        index_elements=["retail_branding", "model"],
    )


class DeviceUpsertSink:
    """
    Writes device records in one transaction.

    Use as a context manager and call ``commit()`` once every record has
    been written; leaving the block without committing rolls back.
    """

    def __init__(self, store: DeviceStore):
        self.store = store
        self.created = 0
        self._session: Session | None = None
        self._statement = None
        self._committed = False
        # A failed statement aborts the whole transaction outside SQLite.
        self._use_savepoints = store.dialect != "sqlite"

    def __enter__(self) -> DeviceUpsertSink:
        self._statement = insert_if_absent_statement(self.store.dialect)
        session = self.store.session()
        try:
            session.connection()
        except SQLAlchemyError as exc:
            session.close()
            raise TransactionError(f"failed to begin transaction: {exc}") from exc
        self._session = session
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if not self._committed:
                self._session.rollback()
        finally:
            self._session.close()
            self._session = None

    def _execute(self, record: DeviceRecord) -> int:
        if self._use_savepoints:
            with self._session.begin_nested():
                result = self._session.execute(self._statement, record.as_params())
        else:
            result = self._session.execute(self._statement, record.as_params())
        return max(result.rowcount or 0, 0)

    def write(self, record: DeviceRecord) -> RowResult:
        if self._session is None:
            raise TransactionError("sink is not open")
        try:
            self.created += self._execute(record)
        except SQLAlchemyError as exc:
            logger.warning("Failed to insert record on line %d: %s", record.line, exc)
            return RowResult(
                line=record.line,
                outcome=RowOutcome.skipped_insert_error,
                reason=str(exc.orig if getattr(exc, "orig", None) is not None else exc),
            )
        return RowResult(line=record.line, outcome=RowOutcome.inserted)

    def commit(self) -> None:
        if self._session is None:
            raise TransactionError("sink is not open")
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            raise CommitError(f"failed to commit transaction: {exc}") from exc
        self._committed = True
