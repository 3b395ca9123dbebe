"""
reviewline.export.service - Format dispatch and export documents.

Entry point for callers such as an HTTP handler or the CLI: pick a format,
get back the document text with its MIME type and download filename.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from reviewline.exceptions import ExportError
from reviewline.export.csv_markers import generate_csv
from reviewline.export.edl import generate_edl
from reviewline.export.markers import clip_name
from reviewline.export.timeline_xml import generate_timeline_xml
from reviewline.logging import logger
from reviewline.models import Annotation, normalize_annotations


class ExportFormat(str, Enum):
    EDL = "edl"
    XML = "xml"
    CSV = "csv"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value


MIME_TYPES = {
    ExportFormat.EDL: "text/plain",
    ExportFormat.XML: "application/xml",
    ExportFormat.CSV: "text/csv",
}

GENERATORS: dict[ExportFormat, Callable[..., str]] = {
    ExportFormat.EDL: generate_edl,
    ExportFormat.XML: generate_timeline_xml,
    ExportFormat.CSV: generate_csv,
}


class ExportDocument(BaseModel):
    """A finished export, ready for download or an HTTP response body."""

    model_config = ConfigDict(frozen=True)

    format: ExportFormat
    content: str
    filename: str

    @property
    def mime_type(self) -> str:
        return self.format.mime_type


def parse_format(value: ExportFormat | str) -> ExportFormat:
    """Resolve a format name such as "EDL" or "csv".

    Raises:
        ExportError: If the format is unknown
    """
    if isinstance(value, ExportFormat):
        return value
    try:
        return ExportFormat(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(f.value for f in ExportFormat)
        raise ExportError(f"Unknown export format '{value}'. Use one of: {valid}") from None


def export_filename(title: str, version_number: int, fmt: ExportFormat | str) -> str:
    """Download filename like "Promo_v2.edl"."""
    fmt = parse_format(fmt)
    stem = clip_name(title, version_number).replace("/", "_").replace("\\", "_")
    return f"{stem}.{fmt.extension}"


def filter_annotations(
    annotations: Iterable[Annotation | Mapping[str, Any]],
    include_resolved: bool = True,
) -> list[Annotation]:
    """Normalize annotations, optionally dropping resolved ones."""
    normalized = normalize_annotations(annotations)
    if include_resolved:
        return normalized
    return [a for a in normalized if not a.is_resolved]


def export_annotations(
    fmt: ExportFormat | str,
    title: str,
    version_number: int,
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: int,
) -> ExportDocument:
    """Generate one export document.

    Args:
        fmt: Export format
        title: Project title
        version_number: Reviewed version number (>= 1)
        annotations: Annotations in output order
        frame_rate: Frames per second (positive int)

    Returns:
        ExportDocument with content, format and filename

    Raises:
        ExportError: If the format is unknown
        ValidationError: If any argument or annotation is invalid
    """
    fmt = parse_format(fmt)
    content = GENERATORS[fmt](title, version_number, annotations, frame_rate)
    filename = export_filename(title, version_number, fmt)
    logger.debug("Exported %s (%d bytes)", filename, len(content.encode("utf-8")))
    return ExportDocument(format=fmt, content=content, filename=filename)
