"""
reviewline.export.timecode - Timecode math utilities.

Handles conversion between seconds, frame counts and non-drop-frame SMPTE
timecodes at integer frame rates. Conversions from seconds always floor to
the frame at or before the given instant.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from reviewline.exceptions import (
    InvalidFrameRateError,
    InvalidTimestampError,
    ValidationError,
)


class Timecode(NamedTuple):
    """Structured HH:MM:SS:FF timecode; str() renders the SMPTE form."""

    hours: int
    minutes: int
    seconds: int
    frames: int

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}:{self.frames:02d}"

    def to_frames(self, frame_rate: int) -> int:
        """Total frame count at the given rate."""
        return timecode_to_frames(self, frame_rate)


def validate_frame_rate(frame_rate: object) -> int:
    """Check that frame_rate is a positive integer.

    Args:
        frame_rate: Candidate frame rate

    Returns:
        The frame rate unchanged

    Raises:
        InvalidFrameRateError: If not an int (bools rejected) or <= 0
    """
    if isinstance(frame_rate, bool) or not isinstance(frame_rate, int) or frame_rate <= 0:
        raise InvalidFrameRateError(frame_rate)
    return frame_rate


def validate_seconds(seconds: object, name: str = "timestamp") -> float:
    """Check that seconds is a finite, non-negative real number.

    Args:
        seconds: Candidate time offset
        name: Field name used in the error message

    Returns:
        The value as a float

    Raises:
        InvalidTimestampError: If negative, NaN, infinite, or not a number
    """
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise InvalidTimestampError(f"{name} must be a number, got {seconds!r}")
    if not math.isfinite(seconds):
        raise InvalidTimestampError(f"{name} must be finite, got {seconds!r}")
    if seconds < 0:
        raise InvalidTimestampError(f"{name} must not be negative, got {seconds!r}")
    return float(seconds)


def seconds_to_frames(seconds: float, frame_rate: int) -> int:
    """Convert seconds to a whole frame count, flooring to the frame.

    Args:
        seconds: Time in seconds (>= 0, finite)
        frame_rate: Frames per second (positive int)

    Returns:
        Largest frame count whose start time is not after ``seconds``
    """
    frame_rate = validate_frame_rate(frame_rate)
    seconds = validate_seconds(seconds)

    scaled = seconds * frame_rate
    if not math.isfinite(scaled):
        raise InvalidTimestampError(f"{seconds!r}s is out of range at {frame_rate} fps")

    return math.floor(scaled)


def frames_to_timecode(total_frames: int, frame_rate: int) -> Timecode:
    """Convert frame count to timecode.

    Args:
        total_frames: Total number of frames (>= 0)
        frame_rate: Frames per second

    Returns:
        Timecode; hours are not wrapped at 24
    """
    frame_rate = validate_frame_rate(frame_rate)
    if isinstance(total_frames, bool) or not isinstance(total_frames, int) or total_frames < 0:
        raise ValidationError(f"Frame count must be a non-negative integer, got {total_frames!r}")

    ff = total_frames % frame_rate
    total_seconds = total_frames // frame_rate
    ss = total_seconds % 60
    mm = (total_seconds // 60) % 60
    hh = total_seconds // 3600

    return Timecode(hh, mm, ss, ff)


def to_timecode(seconds: float, frame_rate: int) -> Timecode:
    """Convert float seconds to non-drop-frame timecode.

    Args:
        seconds: Time in seconds
        frame_rate: Frames per second (24, 25, 30, etc.)

    Returns:
        Timecode floored to the frame

    Raises:
        InvalidFrameRateError: If frame_rate is not a positive int
        InvalidTimestampError: If seconds is negative or not finite
    """
    return frames_to_timecode(seconds_to_frames(seconds, frame_rate), frame_rate)


def seconds_to_timecode(seconds: float, frame_rate: int) -> str:
    """Convert seconds to a timecode string in HH:MM:SS:FF format."""
    return str(to_timecode(seconds, frame_rate))


def parse_timecode(timecode: str, frame_rate: int | None = None) -> Timecode:
    """Parse an HH:MM:SS:FF string.

    Args:
        timecode: Timecode string; drop-frame ';' separators are rejected
        frame_rate: If given, frames must be below it

    Returns:
        Parsed Timecode

    Raises:
        ValidationError: If the string is malformed or a field is out of range
    """
    if ";" in timecode:
        raise ValidationError(f"Drop-frame timecode is not supported: {timecode!r}")

    parts = timecode.strip().split(":")
    if len(parts) != 4 or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Timecode must be HH:MM:SS:FF, got {timecode!r}")

    hh, mm, ss, ff = (int(p) for p in parts)
    if mm >= 60 or ss >= 60:
        raise ValidationError(f"Minutes and seconds must be below 60: {timecode!r}")
    if frame_rate is not None and ff >= validate_frame_rate(frame_rate):
        raise ValidationError(f"Frame {ff} out of range for {frame_rate} fps: {timecode!r}")

    return Timecode(hh, mm, ss, ff)


def timecode_to_frames(timecode: Timecode | str, frame_rate: int) -> int:
    """Convert timecode to frame count.

    Args:
        timecode: Timecode or HH:MM:SS:FF string
        frame_rate: Frames per second

    Returns:
        Frame count
    """
    frame_rate = validate_frame_rate(frame_rate)
    if isinstance(timecode, str):
        timecode = parse_timecode(timecode, frame_rate)
    elif timecode.frames >= frame_rate:
        raise ValidationError(f"Frame {timecode.frames} out of range for {frame_rate} fps")

    hh, mm, ss, ff = timecode
    return (hh * 3600 + mm * 60 + ss) * frame_rate + ff


def timecode_to_seconds(timecode: Timecode | str, frame_rate: int) -> float:
    """Convert timecode to seconds.

    Left inverse of to_timecode up to flooring: the result is never after the
    original seconds and is less than one frame before them.

    Args:
        timecode: Timecode or HH:MM:SS:FF string
        frame_rate: Frames per second

    Returns:
        Time in seconds of the frame's start
    """
    return timecode_to_frames(timecode, frame_rate) / frame_rate
