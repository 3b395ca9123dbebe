"""
reviewline.export.timeline_xml - Marker timeline XML generator.

One <marker> per annotation under a <timeline> root. The label is element
content rather than an attribute so line breaks survive parsing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from reviewline.export.escaping import escape_xml, strip_invalid_xml_chars
from reviewline.export.markers import Marker, prepare_export
from reviewline.logging import logger
from reviewline.models import Annotation, AnnotationStatus

STATUS_COLORS = {
    AnnotationStatus.OPEN: "Red",
    AnnotationStatus.RESOLVED: "Green",
}


def xml_text(value: object) -> str:
    """Make any value safe for XML content or a double-quoted attribute."""
    return escape_xml(strip_invalid_xml_chars(str(value)))


def format_attrs(attrs: dict[str, object]) -> str:
    return "".join(f' {key}="{xml_text(value)}"' for key, value in attrs.items())


def marker_element(marker: Marker, indent: str = "    ") -> list[str]:
    """Render one marker element as lines."""
    annotation = marker.annotation
    attrs: dict[str, object] = {
        "id": annotation.id,
        "index": marker.index,
        "start": marker.start,
        "startFrame": marker.start_frame,
        "end": marker.end,
        "durationFrames": marker.duration_frames,
        "status": annotation.status.value,
        "color": STATUS_COLORS[annotation.status],
    }
    if annotation.author_name:
        attrs["author"] = annotation.author_name

    return [
        f"{indent}<marker{format_attrs(attrs)}>",
        f"{indent}    <label>{xml_text(annotation.text)}</label>",
        f"{indent}</marker>",
    ]


def generate_timeline_xml(
    title: str,
    version_number: int,
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: int,
) -> str:
    """Generate a marker timeline XML document.

    Args:
        title: Project title
        version_number: Reviewed version number (>= 1)
        annotations: Annotations in marker order
        frame_rate: Frames per second (positive int)

    Returns:
        Well-formed XML content as string

    Raises:
        ValidationError: If any argument or annotation is invalid
    """
    title, version_number, markers = prepare_export(
        title, version_number, annotations, frame_rate
    )

    root_attrs = {
        "title": title,
        "versionNumber": version_number,
        "frameRate": frame_rate,
        "markerCount": len(markers),
    }
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f"<timeline{format_attrs(root_attrs)}>",
    ]
    for marker in markers:
        lines.extend(marker_element(marker))
    lines.append("</timeline>")

    logger.debug("Timeline XML %s_v%d: %d markers", title, version_number, len(markers))
    return "\n".join(lines) + "\n"
