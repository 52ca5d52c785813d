from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import numpy as np

from .errors import EmptyInputError, InvalidNoteDurationError, ParameterRangeError
from .notes import Note, NoteInput, coerce_note
from .oscillator import (
    CurveOscillator,
    Oscillator,
    PcmArray,
    SineOscillator,
    check_control_points,
)
from .wav import MAX_SAMPLES

_LOGGER = logging.getLogger("curvetone.orchestrator")

SECONDS_PER_MINUTE = 60.0


def check_bpm(bpm: int) -> None:
    if bpm <= 0:
        raise ParameterRangeError(f"BPM must be greater than 0, got {bpm}")


class Orchestrator(ABC):
    """Render a monophonic note sequence into one PCM buffer.

    Notes play back to back: each one restarts its oscillator at sample index
    zero, and its length is the truncated number of samples covering
    ``beats * 60 / bpm`` seconds. Subclasses pick the oscillator.
    """

    def __init__(self, bpm: int, notes: Iterable[NoteInput]) -> None:
        check_bpm(bpm)
        self._bpm = bpm
        self._notes: tuple[Note, ...] = tuple(coerce_note(note) for note in notes)
        if not self._notes:
            raise EmptyInputError("At least one note is required")

    @property
    def bpm(self) -> int:
        return self._bpm

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    @property
    def seconds_per_beat(self) -> float:
        return SECONDS_PER_MINUTE / float(self._bpm)

    @abstractmethod
    def oscillator_for(self, note: Note, sample_rate: int) -> Oscillator: ...

    def note_sample_count(self, note: Note, sample_rate: int) -> int:
        duration = note.beats * self.seconds_per_beat
        count = duration * sample_rate
        if not math.isfinite(count) or count > MAX_SAMPLES:
            raise InvalidNoteDurationError(
                f"Invalid beats: {note.beats}. Note is too long to fit in a WAV file"
            )
        return int(count)

    def duration_seconds(self) -> float:
        return sum(note.beats for note in self._notes) * self.seconds_per_beat

    def _plan(self, sample_rate: int) -> list[tuple[Oscillator, int]]:
        if sample_rate <= 0:
            raise ParameterRangeError(f"Sample rate must be greater than 0, got {sample_rate}")
        plan: list[tuple[Oscillator, int]] = []
        for position, note in enumerate(self._notes):
            note.validate()
            oscillator = self.oscillator_for(note, sample_rate)
            count = self.note_sample_count(note, sample_rate)
            _LOGGER.debug(
                "Note %d: id=%d octave=%d %.3f Hz, %d samples",
                position,
                note.id,
                note.octave,
                oscillator.frequency,
                count,
            )
            plan.append((oscillator, count))
        return plan

    def total_samples(self, sample_rate: int) -> int:
        return sum(count for _, count in self._plan(sample_rate))

    def pcm_samples(self, sample_rate: int) -> PcmArray:
        plan = self._plan(sample_rate)
        total = sum(count for _, count in plan)
        if total > MAX_SAMPLES:
            raise ParameterRangeError(
                f"Sequence is too long to fit in a WAV file: {total} samples"
            )
        samples: PcmArray = np.empty(total, dtype=np.int16)
        offset = 0
        for oscillator, count in plan:
            samples[offset : offset + count] = oscillator.pcm_samples(count)
            offset += count
        _LOGGER.info(
            "Rendered %d notes at %d bpm into %d samples", len(plan), self._bpm, samples.size
        )
        return samples


class SineOrchestrator(Orchestrator):
    def oscillator_for(self, note: Note, sample_rate: int) -> Oscillator:
        return SineOscillator(
            frequency=note.frequency(),
            amplitude=note.amplitude,
            sample_rate=sample_rate,
        )


class CurveOrchestrator(Orchestrator):
    """Orchestrator whose notes all share one Bezier wave shape."""

    def __init__(
        self,
        bpm: int,
        notes: Iterable[NoteInput],
        control_points: Sequence[float],
    ) -> None:
        check_bpm(bpm)
        self._control_points = check_control_points(control_points)
        super().__init__(bpm, notes)

    @property
    def control_points(self) -> tuple[float, float, float, float]:
        return self._control_points

    def oscillator_for(self, note: Note, sample_rate: int) -> Oscillator:
        return CurveOscillator(
            frequency=note.frequency(),
            amplitude=note.amplitude,
            sample_rate=sample_rate,
            control_points=self._control_points,
        )
