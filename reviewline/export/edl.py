"""
reviewline.export.edl - CMX 3600 EDL generator.

Generates Edit Decision List files for import into DaVinci Resolve,
Premiere Pro, and other NLEs. Each review annotation becomes one cut event
on a placeholder reel whose source and record ranges are the annotated
range of the reviewed media.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from reviewline.export.markers import Marker, clip_name, prepare_export
from reviewline.logging import logger
from reviewline.models import Annotation

REEL_NAME = "AX"
TRACK_TYPE = "V"
EDIT_TYPE = "C"
COMMENT_MAX_LENGTH = 80

_WHITESPACE_RUN = re.compile(r"\s+")


def fold_whitespace(text: str) -> str:
    """Collapse whitespace runs, line breaks included, to single spaces."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def format_comment(text: str, max_length: int = COMMENT_MAX_LENGTH) -> str:
    """Fit annotation text onto a single EDL comment line.

    EDL has no escaping; line breaks are folded into spaces and the result
    is truncated.
    """
    return fold_whitespace(text)[:max_length]


def format_event(marker: Marker, reel: str = REEL_NAME) -> str:
    """Format the event line for one marker."""
    return (
        f"{marker.index:03d}  {reel:<8s} {TRACK_TYPE}     {EDIT_TYPE}        "
        f"{marker.start} {marker.end} {marker.start} {marker.end}"
    )


def generate_edl(
    title: str,
    version_number: int,
    annotations: Iterable[Annotation | Mapping[str, Any]],
    frame_rate: int,
) -> str:
    """Generate a CMX 3600 EDL from review annotations.

    Args:
        title: Project title for the EDL TITLE line
        version_number: Reviewed version number (>= 1)
        annotations: Annotations in the order they should be numbered
        frame_rate: Frames per second (positive int)

    Returns:
        EDL content as string; header only when there are no annotations

    Raises:
        ValidationError: If any argument or annotation is invalid
    """
    title, version_number, markers = prepare_export(
        title, version_number, annotations, frame_rate
    )
    # TITLE and FROM CLIP NAME must each stay on one line
    name = fold_whitespace(clip_name(title, version_number))

    lines = [
        f"TITLE: {name}",
        "FCM: NON-DROP FRAME",
        "",
    ]

    for marker in markers:
        lines.append(format_event(marker))
        lines.append(f"* FROM CLIP NAME: {name}")

        comment = format_comment(marker.annotation.text)
        if comment:
            lines.append(f"* COMMENT: {comment}")

        lines.append("")

    logger.debug("EDL %s: %d events at %d fps", name, len(markers), frame_rate)
    return "\n".join(lines) + "\n"
