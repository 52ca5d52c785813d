from __future__ import annotations


class CurvetoneError(Exception):
    """Base error for the curvetone library."""


class ParameterRangeError(CurvetoneError):
    """Raised when a frequency, amplitude, duration, sample rate or bpm is out of range."""


class ShapeCoefficientError(CurvetoneError):
    """Raised when curve control points are missing, extra, or outside [-1.0, 1.0]."""


class InvalidNoteError(CurvetoneError):
    """Raised when a note in a sequence cannot be rendered."""


class InvalidNoteIdError(InvalidNoteError):
    """Raised when a pitch class id is not between 0 and 11."""


class InvalidNoteAmplitudeError(InvalidNoteError):
    """Raised when a note amplitude is outside [0.0, 1.0]."""


class InvalidNoteDurationError(InvalidNoteError):
    """Raised when a note lasts zero or negative beats."""


class EmptyInputError(CurvetoneError):
    """Raised when a sequence has no notes."""


class TimelineOverlapError(CurvetoneError):
    """Raised when placed notes overlap on the timeline."""


class ContainerError(CurvetoneError):
    """Raised when WAV bytes cannot be parsed."""


class ScoreFormatError(CurvetoneError):
    """Raised when a score document cannot be read or validated."""
