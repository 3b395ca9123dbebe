"""
reviewline.export.csv_markers - Marker-import CSV generator.

One row per annotation, in input order. Rows end with CRLF (RFC 4180),
including the last one; quoted fields keep their own line breaks as-is.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from reviewline.export.escaping import escape_csv_field
from reviewline.export.markers import Marker, clip_name, prepare_export
from reviewline.logging import logger
from reviewline.models import Annotation

LINE_TERMINATOR = "\r\n"

HEADER = [
    "#",
    "Clip",
    "Timecode In",
    "Timecode Out",
    "Duration (Frames)",
    "Status",
    "Author",
    "Comment",
]


def format_row(fields: list[object]) -> str:
    return ",".join(escape_csv_field(str(field)) for field in fields)


def marker_row(marker: Marker, clip: str) -> list[object]:
    annotation = marker.annotation
    return [
        marker.index,
        clip,
        marker.start,
        marker.end,
        marker.duration_frames,
        annotation.status.value,
        annotation.author_label,
        annotation.text,
    ]


def generate_csv(
    title: str,
    version_number: int,
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: int,
) -> str:
    """Generate a marker CSV from review annotations.

    Args:
        title: Project title, used for the Clip column
        version_number: Reviewed version number (>= 1)
        annotations: Annotations in row order
        frame_rate: Frames per second (positive int)

    Returns:
        CSV content as string; header row only when there are no annotations

    Raises:
        ValidationError: If any argument or annotation is invalid
    """
    title, version_number, markers = prepare_export(
        title, version_number, annotations, frame_rate
    )
    clip = clip_name(title, version_number)

    rows = [format_row(HEADER)]
    rows.extend(format_row(marker_row(marker, clip)) for marker in markers)

    logger.debug("CSV %s: %d rows", clip, len(markers))
    return LINE_TERMINATOR.join(rows) + LINE_TERMINATOR
