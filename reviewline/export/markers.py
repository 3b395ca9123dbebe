"""
reviewline.export.markers - Shared per-annotation timing for all exporters.

Every exporter validates its arguments and resolves each annotation into a
Marker up front, so a bad input fails the call before any text is assembled.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from reviewline.exceptions import ValidationError
from reviewline.export.timecode import (
    Timecode,
    frames_to_timecode,
    seconds_to_frames,
    validate_frame_rate,
    validate_seconds,
)
from reviewline.models import Annotation, normalize_annotations


class Marker(NamedTuple):
    """One annotation resolved onto the frame grid."""

    index: int
    annotation: Annotation
    start_frame: int
    end_frame: int
    start: Timecode
    end: Timecode

    @property
    def duration_frames(self) -> int:
        return self.end_frame - self.start_frame


def validate_version_number(version_number: object) -> int:
    if isinstance(version_number, bool) or not isinstance(version_number, int):
        raise ValidationError(f"Version number must be an integer, got {version_number!r}")
    if version_number < 1:
        raise ValidationError(f"Version number must be >= 1, got {version_number}")
    return version_number


def validate_title(title: object) -> str:
    if not isinstance(title, str):
        raise ValidationError(f"Title must be a string, got {type(title).__name__}")
    return title


def clip_name(title: str, version_number: int) -> str:
    """Name of the reviewed media version, e.g. "Promo_v3"."""
    return f"{title}_v{version_number}"


def build_markers(
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: int,
) -> list[Marker]:
    """Normalize annotations and compute their frame positions.

    Args:
        annotations: Annotations or raw records, in output order
        frame_rate: Frames per second

    Returns:
        One Marker per annotation, numbered from 1, in input order

    Raises:
        InvalidFrameRateError: If frame_rate is not a positive int
        InvalidTimestampError: If a timestamp, duration or their sum is invalid
        AnnotationError: If a record is malformed
    """
    frame_rate = validate_frame_rate(frame_rate)
    markers = []
    for i, annotation in enumerate(normalize_annotations(annotations), 1):
        start_frame = seconds_to_frames(annotation.timestamp_seconds, frame_rate)
        end_seconds = validate_seconds(annotation.end_seconds, name=f"end of annotation #{i - 1}")
        end_frame = seconds_to_frames(end_seconds, frame_rate)
        markers.append(
            Marker(
                index=i,
                annotation=annotation,
                start_frame=start_frame,
                end_frame=end_frame,
                start=frames_to_timecode(start_frame, frame_rate),
                end=frames_to_timecode(end_frame, frame_rate),
            )
        )
    return markers


def prepare_export(
    title: object,
    version_number: object,
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: object,
) -> tuple[str, int, list[Marker]]:
    """Validate the common exporter arguments.

    Returns:
        (title, version_number, markers)
    """
    return (
        validate_title(title),
        validate_version_number(version_number),
        build_markers(annotations, frame_rate),
    )
