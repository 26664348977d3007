from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .database import DeviceStore
from .errors import StorageError
from .models import Device

logger = logging.getLogger(__name__)


def find_marketing_name(store: DeviceStore, retail_branding: str, model: str) -> str | None:
    """
    Look up the marketing name for a branding/model pair, ignoring case.

    Returns ``None`` when the pair is unknown. Database failures raise
    ``StorageError`` so callers can tell them apart from a miss.
    """
    query = (
        select(Device.marketing_name)
        .where(Device.retail_branding == retail_branding.lower())
        .where(Device.model == model.lower())
        .limit(1)
    )
    try:
        with store.session() as session:
            return session.execute(query).scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.error("Device lookup failed: %s", exc)
        raise StorageError("Database query error") from exc


def count_devices(store: DeviceStore) -> int:
    try:
        with store.session() as session:
            return session.execute(select(func.count(Device.id))).scalar_one()
    except SQLAlchemyError as exc:
        raise StorageError("Database query error") from exc
