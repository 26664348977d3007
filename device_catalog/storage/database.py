from __future__ import annotations

import logging
import threading
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import DEFAULT_STORAGE_CONFIG, StorageConfig
from .models import Base

logger = logging.getLogger(__name__)


def _engine_kwargs(config: StorageConfig) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": config.echo}
    if config.database_url.startswith("sqlite"):
        # request handlers run in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_recycle"] = config.pool_recycle
    return kwargs


class DeviceStore:
    """
    Handle on the device database.

    Shared by reference between the lookup path and ingestion. The database
    provides transaction isolation; ``ingest_lock`` keeps ingestion runs from
    overlapping within this process.
    """

    def __init__(self, config: StorageConfig = DEFAULT_STORAGE_CONFIG, engine: Engine | None = None):
        self.config = config
        self.engine = engine or create_engine(config.database_url, **_engine_kwargs(config))
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.ingest_lock = threading.Lock()

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Device schema ready on %s", self.dialect)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


_store: DeviceStore | None = None
_store_lock = threading.Lock()


def get_store() -> DeviceStore:
    """Return the process-wide store, creating it and its schema on first call."""
    global _store
    with _store_lock:
        if _store is None:
            _store = DeviceStore()
            _store.create_schema()
        return _store
