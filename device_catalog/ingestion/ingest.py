from __future__ import annotations

import json
import logging
import os
import sys
import time

import httpx

from ..storage.database import DeviceStore, get_store
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from .decoder import open_source_text
from .fetcher import fetch_source
from .normalizer import normalize_record
from .parser import RecordReader, resolve_columns
from .results import (
    IngestionError,
    IngestionInProgressError,
    IngestionSummary,
    RowOutcome,
    RowResult,
)
from .sink import DeviceUpsertSink

logger = logging.getLogger(__name__)


def run_ingestion(
    store: DeviceStore,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
    client: httpx.Client | None = None,
) -> IngestionSummary:
    """
    Execute one ingestion pass.

    Steps:
    - Download the dataset and decode it, dropping a ``#`` license line.
    - Resolve the required columns from the header.
    - Normalize each row and insert it if its branding/model pair is new.
    - Commit once at the end.

    Row-level problems are recorded in the returned summary. Anything that
    prevents the run from completing raises an ``IngestionError``; a run
    already holding the store's ingest lock causes ``IngestionInProgressError``.
    """
    if not store.ingest_lock.acquire(blocking=False):
        raise IngestionInProgressError("an ingestion run is already in progress")
    try:
        return _run(store, config, client)
    finally:
        store.ingest_lock.release()


def _run(
    store: DeviceStore,
    config: IngestionConfig,
    client: httpx.Client | None,
) -> IngestionSummary:
    started = time.monotonic()
    summary = IngestionSummary(source_url=config.source_url)

    raw = fetch_source(config, client=client)
    decoded = open_source_text(raw, encoding=config.source_encoding)
    summary.license_line = decoded.license_line

    reader = RecordReader(decoded.lines)
    summary.header = reader.read_header()
    columns = resolve_columns(summary.header, config.required_columns)

    with DeviceUpsertSink(store) as sink:
        for row in reader:
            if row.error is not None:
                summary.record(
                    RowResult(line=row.line, outcome=RowOutcome.skipped_malformed, reason=row.error)
                )
                continue

            candidate = normalize_record(row.fields, columns, row.line)
            if isinstance(candidate, RowResult):
                summary.record(candidate)
                continue

            summary.record(sink.write(candidate))

        sink.commit()
        summary.created = sink.created

    summary.duration_seconds = time.monotonic() - started
    logger.info(
        "Inserted or ignored %d records (%d new, %d skipped) in %.1fs",
        summary.inserted,
        summary.created,
        len(summary.skipped),
        summary.duration_seconds,
    )
    return summary


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    try:
        result = run_ingestion(get_store())
    except IngestionError as exc:
        logger.error("Failed to update devices: %s", exc)
        sys.exit(1)
    print(json.dumps(result.to_dict(), indent=2))
