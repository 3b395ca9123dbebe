"""
reviewline.exceptions - Custom exception classes.

All Reviewline-specific exceptions inherit from ReviewlineError.
"""


class ReviewlineError(Exception):
    """Base exception for all Reviewline errors."""

    pass


class ConfigError(ReviewlineError):
    """Configuration loading or validation error."""

    pass


class ValidationError(ReviewlineError):
    """Caller-supplied export input was rejected."""

    pass


class InvalidFrameRateError(ValidationError):
    """Frame rate is not a positive integer."""

    def __init__(self, frame_rate: object):
        self.frame_rate = frame_rate
        super().__init__(f"Frame rate must be a positive integer, got {frame_rate!r}")


class InvalidTimestampError(ValidationError):
    """Timestamp or duration is negative, NaN, infinite, or not a number."""

    pass


class AnnotationError(ValidationError):
    """A raw annotation record could not be normalized."""

    def __init__(self, index: int, message: str):
        self.index = index
        self.message = message
        super().__init__(f"Annotation #{index}: {message}")


class ExportError(ReviewlineError):
    """Timeline export error."""

    pass
