from __future__ import annotations

import logging

import httpx

from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from .results import SourceFetchError

logger = logging.getLogger(__name__)


def _get(client: httpx.Client, url: str, timeout: float) -> bytes:
    response = client.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def fetch_source(
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
    client: httpx.Client | None = None,
) -> bytes:
    """
    Download the raw dataset bytes.

    A caller-supplied ``client`` is used as is and left open. The request
    is bounded by ``config.timeout_seconds`` either way. Any non-2xx
    status or transport failure raises ``SourceFetchError``.
    """
    logger.info("Fetching device dataset from %s", config.source_url)
    try:
        if client is not None:
            body = _get(client, config.source_url, config.timeout_seconds)
        else:
            with httpx.Client(timeout=config.timeout_seconds, follow_redirects=True) as own:
                body = _get(own, config.source_url, config.timeout_seconds)
    except httpx.HTTPStatusError as exc:
        raise SourceFetchError(
            f"failed to fetch CSV: HTTP {exc.response.status_code} from {config.source_url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise SourceFetchError(f"failed to fetch CSV: {exc}") from exc

    logger.info("Fetched %d bytes", len(body))
    return body
