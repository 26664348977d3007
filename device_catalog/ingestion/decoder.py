from __future__ import annotations

import codecs
import io
import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from .results import SourceDecodeError

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
BOM_CHAR = "\ufeff"

_BOMS: list[tuple[bytes, str]] = [
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
]


@dataclass
class DecodedSource:
    lines: Iterable[str]
    encoding: str
    license_line: str | None = None


def sniff_encoding(raw: bytes) -> str:
    """Pick a codec from the byte-order mark, falling back to UTF-8."""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return encoding
    return "utf-8"


def open_source_text(raw: bytes, encoding: str | None = None) -> DecodedSource:
    """
    Wrap raw dataset bytes in a decoded line stream.

    The ``utf-16`` and ``utf-8-sig`` codecs consume the BOM themselves. When
    the first line starts with ``#`` it is treated as a license banner and
    dropped; otherwise it is handed on untouched.
    """
    encoding = encoding or sniff_encoding(raw)
    # newline="" keeps embedded line breaks intact for the csv module
    stream: Iterator[str] = io.TextIOWrapper(io.BytesIO(raw), encoding=encoding, newline="")

    try:
        first_line = next(stream, "")
    except UnicodeDecodeError as exc:
        raise SourceDecodeError(f"failed to decode first line as {encoding}: {exc}") from exc

    # a pinned codec such as utf-16-le leaves the BOM in the text
    first_line = first_line.lstrip(BOM_CHAR)
    if not first_line:
        raise SourceDecodeError("source dataset is empty")

    if first_line.startswith(COMMENT_MARKER):
        license_line = first_line.strip()
        logger.info("License line: %s", license_line)
        return DecodedSource(lines=stream, encoding=encoding, license_line=license_line)

    return DecodedSource(lines=itertools.chain([first_line], stream), encoding=encoding)
