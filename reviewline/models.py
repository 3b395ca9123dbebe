"""
reviewline.models - Annotation model and boundary normalization.

Records arriving from the review UI are loosely shaped dicts with camelCase
keys. They are validated into immutable Annotation objects before any
exporter touches them; malformed records are rejected, never coerced.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Annotated, Any

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from reviewline.exceptions import AnnotationError, InvalidTimestampError

# error locations report whichever alias the record used
TIME_FIELDS = frozenset(
    {
        "timestamp_seconds",
        "timestampSeconds",
        "timestamp",
        "duration_seconds",
        "durationSeconds",
        "duration",
    }
)

Seconds = Annotated[float, Field(ge=0.0, allow_inf_nan=False, strict=True)]


class AnnotationStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class Annotation(BaseModel):
    """A time-coded review comment on one media version."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    author_id: str = Field(validation_alias=AliasChoices("author_id", "authorId", "userId"))
    timestamp_seconds: Seconds = Field(
        validation_alias=AliasChoices("timestamp_seconds", "timestampSeconds", "timestamp"),
    )
    duration_seconds: Seconds | None = Field(
        default=None,
        validation_alias=AliasChoices("duration_seconds", "durationSeconds", "duration"),
    )
    text: str
    status: AnnotationStatus
    author_name: str | None = Field(
        default=None, validation_alias=AliasChoices("author_name", "authorName")
    )
    created_at: str | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )

    @property
    def end_seconds(self) -> float:
        """End of the annotated range; equals the start for point markers."""
        return self.timestamp_seconds + (self.duration_seconds or 0.0)

    @property
    def is_resolved(self) -> bool:
        return self.status is AnnotationStatus.RESOLVED

    @property
    def author_label(self) -> str:
        return self.author_name or self.author_id


def _describe(error: pydantic.ValidationError) -> tuple[bool, str]:
    """Summarize a pydantic error; flag whether a time field caused it."""
    details = error.errors()
    time_related = any(d["loc"] and d["loc"][0] in TIME_FIELDS for d in details)
    parts = []
    for d in details:
        loc = ".".join(str(p) for p in d["loc"]) or "record"
        parts.append(f"{loc}: {d['msg']}")
    return time_related, "; ".join(parts)


def normalize_annotation(record: Annotation | Mapping[str, Any], index: int = 0) -> Annotation:
    """Validate one record into an Annotation.

    Args:
        record: Annotation instance or raw mapping from the UI layer
        index: Position of the record, used in error messages

    Returns:
        Validated Annotation

    Raises:
        InvalidTimestampError: If the timestamp or duration is invalid
        AnnotationError: If any other field is missing or malformed
    """
    if isinstance(record, Annotation):
        return record
    if not isinstance(record, Mapping):
        raise AnnotationError(index, f"expected a mapping, got {type(record).__name__}")

    try:
        return Annotation.model_validate(dict(record))
    except pydantic.ValidationError as e:
        time_related, message = _describe(e)
        if time_related:
            raise InvalidTimestampError(f"Annotation #{index}: {message}") from e
        raise AnnotationError(index, message) from e


def normalize_annotations(
    records: Iterable[Annotation | Mapping[str, Any]],
) -> list[Annotation]:
    """Validate a sequence of records, preserving input order."""
    return [normalize_annotation(record, i) for i, record in enumerate(records)]
