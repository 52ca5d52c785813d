from __future__ import annotations

import struct

import numpy as np
import pytest

from curvetone.errors import (
    EmptyInputError,
    InvalidNoteIdError,
    ParameterRangeError,
    ShapeCoefficientError,
)
from curvetone.notes import Note
from curvetone.oscillator import CurveOscillator, SineOscillator
from curvetone.synthesis import (
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
from curvetone.wav import HEADER_SIZE, parse_header

NOTES = [
    Note(id=9, octave=4, beats=1.0, amplitude=0.8),
    Note(id=4, octave=4, beats=0.5, amplitude=0.6),
    Note(id=0, octave=5, beats=0.25, amplitude=1.0),
]
SHAPE = [0.0, 1.0, -1.0, 0.0]


def _data_size(data: bytes) -> int:
    (size,) = struct.unpack_from("<I", data, 40)
    return size


@pytest.mark.parametrize(
    ("frequency", "sample_rate", "duration", "amplitude"),
    [(440.0, 44_100, 1.0, 0.5), (261.63, 8_000, 0.333, 1.0), (20.0, 22_050, 0.01, 0.0)],
)
def test_sine_tone_sizes(
    frequency: float, sample_rate: int, duration: float, amplitude: float
) -> None:
    data = sine_tone(frequency, sample_rate, duration, amplitude)
    expected = int(duration * sample_rate) * 2
    assert _data_size(data) == expected
    assert len(data) == HEADER_SIZE + expected


def test_sine_tone_payload_matches_oscillator() -> None:
    data = sine_tone(440.0, 8_000, 0.1, 0.7)
    expected = SineOscillator(frequency=440.0, amplitude=0.7, sample_rate=8_000).pcm_samples(800)
    assert np.array_equal(np.frombuffer(data[HEADER_SIZE:], dtype="<i2"), expected)


@pytest.mark.parametrize(
    ("frequency", "sample_rate", "duration", "amplitude", "field"),
    [
        (0.0, 44_100, 1.0, 0.5, "Frequency"),
        (440.0, 0, 1.0, 0.5, "Sample rate"),
        (440.0, 44_100, 0.0, 0.5, "Duration"),
        (440.0, 44_100, 1.0, 1.5, "Amplitude"),
    ],
)
def test_sine_tone_rejects_bad_params(
    frequency: float, sample_rate: int, duration: float, amplitude: float, field: str
) -> None:
    with pytest.raises(ParameterRangeError, match=field):
        sine_tone(frequency, sample_rate, duration, amplitude)


def test_curve_tone_payload_matches_oscillator() -> None:
    data = curve_tone(330.0, 8_000, SHAPE, 0.05, 0.9)
    expected = CurveOscillator(330.0, 0.9, 8_000, SHAPE).pcm_samples(400)
    assert parse_header(data).frames == 400
    assert np.array_equal(np.frombuffer(data[HEADER_SIZE:], dtype="<i2"), expected)


def test_curve_tone_rejects_bad_shape() -> None:
    with pytest.raises(ShapeCoefficientError):
        curve_tone(330.0, 8_000, [0.0, 0.0, 0.0, 0.0, 0.0], 0.05, 0.9)


def test_curve_tone_checks_params_before_shape() -> None:
    with pytest.raises(ParameterRangeError):
        curve_tone(330.0, 8_000, [0.0], -1.0, 0.9)


def test_sine_sequence_length() -> None:
    data = sine_sequence(60, NOTES, 8_000)
    assert parse_header(data).frames == 8_000 + 4_000 + 2_000


def test_curve_sequence_length() -> None:
    data = curve_sequence(SHAPE, 120, NOTES, 8_000)
    assert parse_header(data).frames == 4_000 + 2_000 + 1_000


def test_sequence_aborts_on_invalid_note() -> None:
    notes = [NOTES[0], NOTES[1], Note(id=12, octave=4, beats=1.0, amplitude=0.5)]
    with pytest.raises(InvalidNoteIdError):
        sine_sequence(120, notes, 44_100)
    with pytest.raises(InvalidNoteIdError):
        curve_sequence(SHAPE, 120, notes, 44_100)


def test_sequence_rejects_empty_notes() -> None:
    with pytest.raises(EmptyInputError):
        sine_sequence(120, [], 44_100)
    with pytest.raises(EmptyInputError):
        curve_sequence(SHAPE, 120, [], 44_100)


def test_curve_sequence_rejects_zero_bpm() -> None:
    with pytest.raises(ParameterRangeError, match="BPM"):
        curve_sequence([0.0], 0, NOTES, 44_100)


class TestSynthesize:
    def test_tone_request_succeeds(self) -> None:
        result = synthesize(ToneRequest(frequency=440.0, duration=0.01, amplitude=0.5))
        assert result.ok
        assert result.error is None
        assert result.data == sine_tone(440.0, 44_100, 0.01, 0.5)

    def test_curve_tone_request(self) -> None:
        request = CurveToneRequest(
            frequency=220.0, sample_rate=8_000, control_points=SHAPE, duration=0.1, amplitude=1.0
        )
        assert synthesize(request).data == curve_tone(220.0, 8_000, SHAPE, 0.1, 1.0)

    def test_sequence_requests(self) -> None:
        sine = synthesize(SequenceRequest(bpm=60, notes=NOTES, sample_rate=8_000))
        curve = synthesize(
            CurveSequenceRequest(control_points=SHAPE, bpm=60, notes=NOTES, sample_rate=8_000)
        )
        assert sine.data == sine_sequence(60, NOTES, 8_000)
        assert curve.data == curve_sequence(SHAPE, 60, NOTES, 8_000)

    def test_mapping_request_is_dispatched_on_kind(self) -> None:
        result = synthesize(
            {
                "kind": "sequence",
                "bpm": 60,
                "sample_rate": 8_000,
                "notes": [{"id": 9, "octave": 4, "beats": 1.0, "amplitude": 0.5}],
            }
        )
        assert result.ok
        assert result.data is not None
        assert parse_header(result.data).frames == 8_000

    def test_failure_carries_message_and_no_data(self) -> None:
        notes = [*NOTES[:2], Note(id=12, octave=4, beats=1.0, amplitude=0.5)]
        result = synthesize(SequenceRequest(bpm=120, notes=notes))
        assert result == SynthesisResult(
            ok=False, error="Invalid note id: 12. Note id must be between 0 and 11"
        )
        assert result.data is None

    def test_parameter_failure(self) -> None:
        result = synthesize(ToneRequest(frequency=-5.0, duration=1.0, amplitude=0.5))
        assert not result.ok
        assert result.error == "Frequency must be greater than 0, got -5.0"

    def test_empty_notes_failure(self) -> None:
        result = synthesize(SequenceRequest(bpm=120, notes=()))
        assert result.error == "At least one note is required"

    def test_malformed_mapping(self) -> None:
        result = synthesize({"kind": "chord", "notes": []})
        assert not result.ok
        assert result.error is not None
        assert result.error.startswith("Invalid request")

    def test_unsupported_type(self) -> None:
        result = synthesize(42)  # type: ignore[arg-type]
        assert result.error == "Unsupported request type: int"

    def test_octave_beyond_score_range_is_invalid_request(self) -> None:
        result = synthesize(
            {
                "kind": "sequence",
                "bpm": 120,
                "notes": [{"id": 9, "octave": 5_000, "beats": 1.0, "amplitude": 0.5}],
            }
        )
        assert not result.ok
        assert result.data is None
        assert result.error is not None
        assert result.error.startswith("Invalid request")

    def test_highest_octave_still_renders(self) -> None:
        note = Note(id=11, octave=255, beats=0.01, amplitude=0.5)
        result = synthesize(SequenceRequest(bpm=60, notes=(note,), sample_rate=8_000))
        assert result.ok
        assert result.data is not None
        assert parse_header(result.data).frames == 80

    def test_infinite_duration_is_reported(self) -> None:
        result = synthesize(ToneRequest(frequency=440.0, duration=float("inf"), amplitude=0.5))
        assert not result.ok
        assert result.error == "Duration inf at 44100 Hz is too long to fit in a WAV file"

    def test_duration_overflowing_wav_size_is_reported(self) -> None:
        result = synthesize(
            CurveToneRequest(frequency=440.0, control_points=SHAPE, duration=1e6, amplitude=0.5)
        )
        assert not result.ok
        assert result.error is not None
        assert "too long" in result.error

    def test_huge_beats_are_reported(self) -> None:
        note = Note(id=9, octave=4, beats=1e308, amplitude=0.5)
        result = synthesize(SequenceRequest(bpm=120, notes=(note,)))
        assert not result.ok
        assert result.error is not None
        assert result.error.startswith("Invalid beats: 1e+308")

    @pytest.mark.parametrize(
        ("frequency", "amplitude", "message"),
        [
            (float("inf"), 0.5, "Frequency must be finite"),
            (float("nan"), 0.5, "Frequency must be finite"),
            (440.0, float("nan"), "Amplitude must be between 0.0 and 1.0"),
        ],
    )
    def test_non_finite_tone_params_are_reported(
        self, frequency: float, amplitude: float, message: str
    ) -> None:
        result = synthesize(ToneRequest(frequency=frequency, duration=0.1, amplitude=amplitude))
        assert not result.ok
        assert result.error is not None
        assert result.error.startswith(message)
