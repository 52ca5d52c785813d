"""JSON score documents.

A score is the document exported by the web editor::

    {
      "bpm": 120,
      "control_points": [0.5, -0.5, 0.0, 0.0],
      "notes": [{"id": 9, "octave": 4, "beats": 1.0, "amplitude": 0.8}],
      "_x": [133, 266]
    }

``control_points`` selects the curve orchestrator; without it the notes are
rendered with sine waves. Keys this package does not use are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ScoreFormatError
from .notes import Note
from .synthesis import curve_sequence, sine_sequence
from .timeline import PlacedNote, build_timeline
from .wav import SAMPLE_RATE, write_output

_LOGGER = logging.getLogger("curvetone.score")

DEFAULT_BPM = 120


class Score(BaseModel):
    bpm: int = DEFAULT_BPM
    control_points: tuple[float, ...] | None = None
    notes: tuple[Note, ...]
    sample_rate: int = SAMPLE_RATE

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def from_timeline(
        cls,
        placed: Iterable[PlacedNote],
        *,
        bpm: int = DEFAULT_BPM,
        control_points: Sequence[float] | None = None,
        sample_rate: int = SAMPLE_RATE,
    ) -> "Score":
        return cls(
            bpm=bpm,
            control_points=tuple(control_points) if control_points is not None else None,
            notes=tuple(build_timeline(placed)),
            sample_rate=sample_rate,
        )

    @property
    def waveform(self) -> str:
        return "sine" if self.control_points is None else "curve"

    def render(self, *, sample_rate: int | None = None) -> bytes:
        rate = self.sample_rate if sample_rate is None else sample_rate
        if self.control_points is None:
            return sine_sequence(self.bpm, self.notes, rate)
        return curve_sequence(self.control_points, self.bpm, self.notes, rate)


def load_score(path: str | Path) -> Score:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScoreFormatError(f"Could not read score {source}: {exc}") from exc
    try:
        score = Score.model_validate_json(text)
    except ValidationError as exc:
        raise ScoreFormatError(f"Invalid score {source}: {exc}") from exc
    _LOGGER.debug("Loaded %s score with %d notes from %s", score.waveform, len(score.notes), source)
    return score


def dump_score(score: Score, path: str | Path) -> Path:
    text = score.model_dump_json(indent=2, exclude_none=True)
    return write_output(path, text.encode("utf-8"))
