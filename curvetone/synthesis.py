from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import CurvetoneError, ParameterRangeError
from .notes import Note, NoteInput
from .orchestrator import CurveOrchestrator, SineOrchestrator
from .oscillator import CurveOscillator, Oscillator, SineOscillator
from .wav import MAX_SAMPLES, SAMPLE_RATE, to_bytes

_LOGGER = logging.getLogger("curvetone.synthesis")


def _check_tone_params(
    frequency: float, sample_rate: int, duration: float, amplitude: float
) -> None:
    if frequency <= 0.0:
        raise ParameterRangeError(f"Frequency must be greater than 0, got {frequency}")
    if not math.isfinite(frequency):
        raise ParameterRangeError(f"Frequency must be finite, got {frequency}")
    if sample_rate <= 0:
        raise ParameterRangeError(f"Sample rate must be greater than 0, got {sample_rate}")
    if duration <= 0.0:
        raise ParameterRangeError(f"Duration must be greater than 0, got {duration}")
    total_samples = duration * sample_rate
    if not math.isfinite(total_samples) or total_samples > MAX_SAMPLES:
        raise ParameterRangeError(
            f"Duration {duration} at {sample_rate} Hz is too long to fit in a WAV file"
        )
    if not 0.0 <= amplitude <= 1.0:
        raise ParameterRangeError(f"Amplitude must be between 0.0 and 1.0, got {amplitude}")


def _render_tone(oscillator: Oscillator, duration: float) -> bytes:
    total_samples = int(duration * oscillator.sample_rate)
    samples = oscillator.pcm_samples(total_samples)
    _LOGGER.debug(
        "Rendered %s at %.3f Hz: %d samples",
        type(oscillator).__name__,
        oscillator.frequency,
        total_samples,
    )
    return to_bytes(samples, oscillator.sample_rate)


def sine_tone(frequency: float, sample_rate: int, duration: float, amplitude: float) -> bytes:
    """Render ``duration`` seconds of a sine wave as WAV bytes."""

    _check_tone_params(frequency, sample_rate, duration, amplitude)
    oscillator = SineOscillator(frequency=frequency, amplitude=amplitude, sample_rate=sample_rate)
    return _render_tone(oscillator, duration)


def curve_tone(
    frequency: float,
    sample_rate: int,
    control_points: Sequence[float],
    duration: float,
    amplitude: float,
) -> bytes:
    """Render ``duration`` seconds of a Bezier-shaped wave as WAV bytes."""

    _check_tone_params(frequency, sample_rate, duration, amplitude)
    oscillator = CurveOscillator(
        frequency=frequency,
        amplitude=amplitude,
        sample_rate=sample_rate,
        control_points=control_points,
    )
    return _render_tone(oscillator, duration)


def sine_sequence(bpm: int, notes: Iterable[NoteInput], sample_rate: int) -> bytes:
    orchestrator = SineOrchestrator(bpm, notes)
    return to_bytes(orchestrator.pcm_samples(sample_rate), sample_rate)


def curve_sequence(
    control_points: Sequence[float],
    bpm: int,
    notes: Iterable[NoteInput],
    sample_rate: int,
) -> bytes:
    orchestrator = CurveOrchestrator(bpm, notes, control_points)
    return to_bytes(orchestrator.pcm_samples(sample_rate), sample_rate)


# -----------------------------------------------------------------------------
# Tagged requests and results
# -----------------------------------------------------------------------------


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ToneRequest(_Request):
    kind: Literal["tone"] = "tone"
    frequency: float
    sample_rate: int = SAMPLE_RATE
    duration: float
    amplitude: float

    def render(self) -> bytes:
        return sine_tone(self.frequency, self.sample_rate, self.duration, self.amplitude)


class CurveToneRequest(_Request):
    kind: Literal["curve_tone"] = "curve_tone"
    frequency: float
    sample_rate: int = SAMPLE_RATE
    control_points: tuple[float, ...]
    duration: float
    amplitude: float

    def render(self) -> bytes:
        return curve_tone(
            self.frequency,
            self.sample_rate,
            self.control_points,
            self.duration,
            self.amplitude,
        )


class SequenceRequest(_Request):
    kind: Literal["sequence"] = "sequence"
    bpm: int
    notes: tuple[Note, ...]
    sample_rate: int = SAMPLE_RATE

    def render(self) -> bytes:
        return sine_sequence(self.bpm, self.notes, self.sample_rate)


class CurveSequenceRequest(_Request):
    kind: Literal["curve_sequence"] = "curve_sequence"
    control_points: tuple[float, ...]
    bpm: int
    notes: tuple[Note, ...]
    sample_rate: int = SAMPLE_RATE

    def render(self) -> bytes:
        return curve_sequence(self.control_points, self.bpm, self.notes, self.sample_rate)


SynthesisRequest = Annotated[
    ToneRequest | CurveToneRequest | SequenceRequest | CurveSequenceRequest,
    Field(discriminator="kind"),
]
_REQUEST_ADAPTER: TypeAdapter[
    ToneRequest | CurveToneRequest | SequenceRequest | CurveSequenceRequest
] = TypeAdapter(SynthesisRequest)


class SynthesisResult(BaseModel):
    ok: bool
    data: bytes | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def success(cls, data: bytes) -> "SynthesisResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, message: str) -> "SynthesisResult":
        return cls(ok=False, error=message)


def parse_request(
    payload: Mapping[str, Any],
) -> ToneRequest | CurveToneRequest | SequenceRequest | CurveSequenceRequest:
    return _REQUEST_ADAPTER.validate_python(dict(payload))


def synthesize(
    request: ToneRequest
    | CurveToneRequest
    | SequenceRequest
    | CurveSequenceRequest
    | Mapping[str, Any],
) -> SynthesisResult:
    """Run one request and report the outcome as a tagged result.

    Library errors never escape: the failure message is returned unchanged in
    ``SynthesisResult.error`` and no bytes are attached.
    """

    try:
        match request:
            case ToneRequest() | CurveToneRequest() | SequenceRequest() | CurveSequenceRequest():
                parsed = request
            case Mapping():
                parsed = parse_request(request)
            case _:
                return SynthesisResult.failure(
                    f"Unsupported request type: {type(request).__name__}"
                )
        return SynthesisResult.success(parsed.render())
    except ValidationError as exc:
        _LOGGER.info("Rejected malformed request: %s", exc)
        return SynthesisResult.failure(f"Invalid request: {exc}")
    except CurvetoneError as exc:
        _LOGGER.info("Synthesis failed: %s", exc)
        return SynthesisResult.failure(str(exc))
