from __future__ import annotations

from .errors import (
    ContainerError,
    CurvetoneError,
    EmptyInputError,
    InvalidNoteAmplitudeError,
    InvalidNoteDurationError,
    InvalidNoteError,
    InvalidNoteIdError,
    ParameterRangeError,
    ScoreFormatError,
    ShapeCoefficientError,
    TimelineOverlapError,
)
from .logging_utils import configure_logging as _configure_logging
from .notes import Note
from .orchestrator import CurveOrchestrator, Orchestrator, SineOrchestrator
from .oscillator import PCM_BIT_RANGE, CurveOscillator, Oscillator, SineOscillator
from .score import Score, dump_score, load_score
from .synthesis import (
    CurveSequenceRequest,
    CurveToneRequest,
    SequenceRequest,
    SynthesisResult,
    ToneRequest,
    curve_sequence,
    curve_tone,
    sine_sequence,
    sine_tone,
    synthesize,
)
from .timeline import PlacedNote, build_timeline
from .wav import SAMPLE_RATE, parse_header, read_wav, to_bytes, write_wav

__all__ = [
    "PCM_BIT_RANGE",
    "SAMPLE_RATE",
    "ContainerError",
    "CurveOrchestrator",
    "CurveOscillator",
    "CurveSequenceRequest",
    "CurveToneRequest",
    "CurvetoneError",
    "EmptyInputError",
    "InvalidNoteAmplitudeError",
    "InvalidNoteDurationError",
    "InvalidNoteError",
    "InvalidNoteIdError",
    "Note",
    "Orchestrator",
    "Oscillator",
    "ParameterRangeError",
    "PlacedNote",
    "Score",
    "ScoreFormatError",
    "SequenceRequest",
    "ShapeCoefficientError",
    "SineOrchestrator",
    "SineOscillator",
    "SynthesisResult",
    "TimelineOverlapError",
    "ToneRequest",
    "build_timeline",
    "curve_sequence",
    "curve_tone",
    "dump_score",
    "load_score",
    "parse_header",
    "read_wav",
    "sine_sequence",
    "sine_tone",
    "synthesize",
    "to_bytes",
    "write_wav",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
