from __future__ import annotations

import logging
from typing import Sequence

from .parser import ColumnIndex
from .results import DeviceRecord, RowOutcome, RowResult

logger = logging.getLogger(__name__)


def normalize_record(
    fields: Sequence[str],
    columns: ColumnIndex,
    line: int,
) -> DeviceRecord | RowResult:
    """
    Turn one parsed row into a device record.

    Branding and model are lowercased so lookups can ignore case; the
    marketing name keeps its original spelling. Rows too short to hold every
    required field come back as a ``skipped_short_record`` result, and
    trailing extra fields are ignored.
    """
    if len(fields) < columns.min_fields:
        logger.warning("Record on line %d does not have required fields", line)
        return RowResult(
            line=line,
            outcome=RowOutcome.skipped_short_record,
            reason=f"expected at least {columns.min_fields} fields, got {len(fields)}",
        )

    return DeviceRecord(
        retail_branding=fields[columns.retail_branding].lower(),
        marketing_name=fields[columns.marketing_name],
        model=fields[columns.model].lower(),
        line=line,
    )
