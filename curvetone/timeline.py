from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .errors import TimelineOverlapError
from .notes import Note

_LOGGER = logging.getLogger("curvetone.timeline")


class PlacedNote(BaseModel):
    """A note pinned to an absolute beat position on an editor timeline."""

    note: Note
    start: float = Field(ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def end(self) -> float:
        return self.start + self.note.beats

    def overlaps(self, other: "PlacedNote") -> bool:
        return self.start < other.end and self.end > other.start


def find_overlap(
    placed: Sequence[PlacedNote], candidate: PlacedNote
) -> PlacedNote | None:
    for existing in placed:
        if existing.overlaps(candidate):
            return existing
    return None


def check_overlaps(placed: Iterable[PlacedNote]) -> None:
    seen: list[PlacedNote] = []
    for candidate in placed:
        clash = find_overlap(seen, candidate)
        if clash is not None:
            raise TimelineOverlapError(
                f"Note at beats {candidate.start}-{candidate.end} overlaps "
                f"note at beats {clash.start}-{clash.end}"
            )
        seen.append(candidate)


def build_timeline(placed: Iterable[PlacedNote]) -> list[Note]:
    """Flatten placed notes into the sequential list the orchestrator renders.

    Notes are ordered by start beat and every gap between two notes becomes a
    silent rest of the same length. Silence before the first note is dropped.
    """

    ordered = sorted(placed, key=lambda item: item.start)
    check_overlaps(ordered)
    notes: list[Note] = []
    for index, current in enumerate(ordered):
        notes.append(current.note)
        if index == len(ordered) - 1:
            continue
        gap = ordered[index + 1].start - current.end
        if gap > 0:
            notes.append(Note.rest(gap))
    _LOGGER.debug("Built timeline of %d notes from %d placed notes", len(notes), len(ordered))
    return notes
