from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IngestionError(Exception):
    """Base class for failures that abort a whole ingestion run."""


class SourceFetchError(IngestionError):
    pass


class SourceDecodeError(IngestionError):
    pass


class MissingColumnsError(IngestionError):
    def __init__(self, missing: list[str], available: list[str]):
        self.missing = missing
        self.available = available
        super().__init__(
            f"required header fields not found: {missing} (available: {available})"
        )


class TransactionError(IngestionError):
    pass


class CommitError(IngestionError):
    """Commit failed; rows may or may not be durable. Re-running is safe."""


class IngestionInProgressError(IngestionError):
    pass


class RowOutcome(str, Enum):
    inserted = "inserted"
    skipped_malformed = "skipped_malformed"
    skipped_short_record = "skipped_short_record"
    skipped_insert_error = "skipped_insert_error"


@dataclass(frozen=True)
class RowResult:
    line: int
    outcome: RowOutcome
    reason: str | None = None


@dataclass(frozen=True)
class DeviceRecord:
    retail_branding: str
    marketing_name: str
    model: str
    line: int

    def as_params(self) -> dict[str, str]:
        return {
            "retail_branding": self.retail_branding,
            "marketing_name": self.marketing_name,
            "model": self.model,
        }


@dataclass
class IngestionSummary:
    """Aggregated outcome of one ingestion run."""

    source_url: str
    inserted: int = 0
    created: int = 0
    skipped: list[RowResult] = field(default_factory=list)
    license_line: str | None = None
    header: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    def record(self, result: RowResult) -> None:
        if result.outcome is RowOutcome.inserted:
            self.inserted += 1
        else:
            self.skipped.append(result)

    def count(self, outcome: RowOutcome) -> int:
        if outcome is RowOutcome.inserted:
            return self.inserted
        return sum(1 for r in self.skipped if r.outcome is outcome)

    @property
    def skipped_malformed(self) -> int:
        return self.count(RowOutcome.skipped_malformed)

    @property
    def skipped_short_record(self) -> int:
        return self.count(RowOutcome.skipped_short_record)

    @property
    def skipped_insert_error(self) -> int:
        return self.count(RowOutcome.skipped_insert_error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_url": self.source_url,
            "inserted": self.inserted,
            "created": self.created,
            "skipped_malformed": self.skipped_malformed,
            "skipped_short_record": self.skipped_short_record,
            "skipped_insert_error": self.skipped_insert_error,
            "skipped": [
                {"line": r.line, "outcome": r.outcome.value, "reason": r.reason}
                for r in self.skipped
            ],
            "license_line": self.license_line,
            "header": self.header,
            "duration_seconds": round(self.duration_seconds, 3),
        }
