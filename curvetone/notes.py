from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import (
    InvalidNoteAmplitudeError,
    InvalidNoteDurationError,
    InvalidNoteError,
    InvalidNoteIdError,
)

REFERENCE_FREQUENCY = 440.0
REFERENCE_ID = 9
REFERENCE_OCTAVE = 4
PITCH_CLASS_COUNT = 12
# Octaves are stored as one unsigned byte in exported scores.
MAX_OCTAVE = 255

PITCH_CLASS_NAMES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

_LETTER_SEMITONES: Mapping[str, int] = MappingProxyType(
    {"c": 0, "d": 2, "e": 4, "f": 5, "g": 7, "a": 9, "b": 11}
)
_ACCIDENTALS: Mapping[str, int] = MappingProxyType({"": 0, "#": 1, "b": -1})
_NAME_PATTERN = re.compile(r"^([a-g])([#b]?)(\d)$", re.IGNORECASE)


def _invalid_id_message(note_id: int) -> str:
    return f"Invalid note id: {note_id}. Note id must be between 0 and 11"


class Note(BaseModel):
    """One entry of a monophonic note sequence.

    Construction enforces field types and the stored octave range; the other
    range checks live in :meth:`validate` so that a bad note is reported when
    the sequence is rendered, alongside its position in the sequence.
    """

    id: int = Field(ge=0, description="Pitch class, 0 = C ... 11 = B")
    octave: int = Field(ge=0, le=MAX_OCTAVE)
    beats: float
    amplitude: float

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_name(cls, name: str, *, beats: float = 1.0, amplitude: float = 1.0) -> "Note":
        """Build a note from scientific pitch notation such as ``"A4"`` or ``"Db3"``."""

        match = _NAME_PATTERN.match(name.strip())
        if match is None:
            raise InvalidNoteIdError(f"Invalid note name: {name!r}. Expected a form like 'C#4'")
        letter, accidental, octave = match.groups()
        note_id = _LETTER_SEMITONES[letter.lower()] + _ACCIDENTALS[accidental.lower()]
        if not 0 <= note_id < PITCH_CLASS_COUNT:
            raise InvalidNoteIdError(f"Invalid note name: {name!r}. Pitch falls outside its octave")
        return cls(id=note_id, octave=int(octave), beats=beats, amplitude=amplitude)

    @classmethod
    def rest(cls, beats: float) -> "Note":
        return cls(id=0, octave=0, beats=beats, amplitude=0.0)

    @property
    def name(self) -> str:
        if self.id >= PITCH_CLASS_COUNT:
            raise InvalidNoteIdError(_invalid_id_message(self.id))
        return f"{PITCH_CLASS_NAMES[self.id]}{self.octave}"

    @property
    def is_rest(self) -> bool:
        return self.amplitude == 0.0

    def frequency(self) -> float:
        """Equal-tempered frequency in Hz, with A4 = 440 Hz."""

        if self.id >= PITCH_CLASS_COUNT:
            raise InvalidNoteIdError(_invalid_id_message(self.id))
        semitones = (self.id - REFERENCE_ID) + PITCH_CLASS_COUNT * (self.octave - REFERENCE_OCTAVE)
        return REFERENCE_FREQUENCY * 2.0 ** (semitones / PITCH_CLASS_COUNT)

    def validate(self) -> None:  # type: ignore[override]
        if self.id >= PITCH_CLASS_COUNT:
            raise InvalidNoteIdError(_invalid_id_message(self.id))
        if not 0.0 <= self.amplitude <= 1.0:
            raise InvalidNoteAmplitudeError(
                f"Invalid amplitude: {self.amplitude}. Amplitude must be between 0.0 and 1.0"
            )
        if self.beats <= 0.0:
            raise InvalidNoteDurationError(
                f"Invalid beats: {self.beats}. Beats must be greater than 0"
            )


NoteInput = Note | Mapping[str, Any]


def coerce_note(value: NoteInput) -> Note:
    match value:
        case Note():
            return value
        case Mapping():
            try:
                return Note.model_validate(dict(value))
            except ValidationError as exc:
                raise InvalidNoteError(f"Failed to parse note {dict(value)!r}: {exc}") from exc
        case _:
            raise InvalidNoteError(f"Expected a Note or mapping, got {type(value).__name__}")
