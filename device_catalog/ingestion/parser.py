from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from .config import MARKETING_NAME, MODEL, RETAIL_BRANDING
from .results import MissingColumnsError, SourceDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedRow:
    line: int
    fields: list[str]
    error: str | None = None


@dataclass(frozen=True)
class ColumnIndex:
    retail_branding: int
    marketing_name: int
    model: int

    @property
    def min_fields(self) -> int:
        """Shortest row that still holds every required field."""
        return max(self.retail_branding, self.marketing_name, self.model) + 1


def build_header_map(header: Sequence[str]) -> dict[str, int]:
    # Later duplicates overwrite earlier ones.
    return {name.strip().lower(): i for i, name in enumerate(header)}


def resolve_columns(
    header: Sequence[str],
    required: Sequence[str] = (RETAIL_BRANDING, MARKETING_NAME, MODEL),
) -> ColumnIndex:
    """
    Map the required logical columns to their positions in ``header``.

    Matching ignores case and surrounding whitespace. Raises
    ``MissingColumnsError`` listing every absent column.
    """
    header_map = build_header_map(header)
    missing = [name for name in required if name not in header_map]
    if missing:
        logger.error("Required header fields not found: %s", missing)
        logger.error("Available header fields: %s", list(header_map))
        raise MissingColumnsError(missing, list(header_map))

    branding, marketing, model = (header_map[name] for name in required)
    return ColumnIndex(retail_branding=branding, marketing_name=marketing, model=model)


class RecordReader:
    """
    Lenient CSV reader over decoded lines.

    Quotes are not validated and rows may carry any number of fields. The
    header counts as line 1 and every later record advances the counter by
    one, malformed records included.
    """

    def __init__(self, lines: Iterable[str]):
        self._reader = csv.reader(lines, strict=False)
        self._header: list[str] | None = None
        self.line = 0

    def read_header(self) -> list[str]:
        if self._header is not None:
            return self._header
        try:
            header = next(self._reader)
        except StopIteration:
            raise SourceDecodeError("failed to read CSV header: no data after license line") from None
        except (csv.Error, UnicodeDecodeError) as exc:
            raise SourceDecodeError(f"failed to read CSV header: {exc}") from exc
        self.line = 1
        self._header = header
        logger.info("CSV Header: %s", header)
        return header

    def __iter__(self) -> Iterator[ParsedRow]:
        self.read_header()
        while True:
            try:
                fields = next(self._reader)
            except StopIteration:
                return
            except UnicodeDecodeError as exc:
                raise SourceDecodeError(
                    f"failed to decode CSV near line {self.line + 1}: {exc}"
                ) from exc
            except csv.Error as exc:
                self.line += 1
                logger.warning("Failed to read CSV record on line %d: %s", self.line, exc)
                yield ParsedRow(line=self.line, fields=[], error=str(exc))
                continue
            # blank lines are not records
            if not fields:
                continue
            self.line += 1
            yield ParsedRow(line=self.line, fields=fields)
