from __future__ import annotations

import pytest

from curvetone.errors import TimelineOverlapError
from curvetone.notes import Note
from curvetone.timeline import PlacedNote, build_timeline, check_overlaps, find_overlap


def _placed(start: float, beats: float, note_id: int = 9) -> PlacedNote:
    return PlacedNote(note=Note(id=note_id, octave=4, beats=beats, amplitude=0.8), start=start)


def test_gap_between_notes_becomes_rest() -> None:
    notes = build_timeline([_placed(0.0, 1.0, 0), _placed(2.0, 1.0, 4)])
    assert [note.id for note in notes] == [0, 0, 4]
    assert notes[1] == Note.rest(1.0)


def test_notes_are_sorted_by_start() -> None:
    notes = build_timeline([_placed(1.0, 1.0, 7), _placed(0.0, 1.0, 2)])
    assert [note.id for note in notes] == [2, 7]


def test_adjacent_notes_have_no_rest() -> None:
    notes = build_timeline([_placed(0.0, 0.5), _placed(0.5, 0.5), _placed(1.0, 2.0)])
    assert len(notes) == 3
    assert not any(note.is_rest for note in notes)


def test_leading_silence_is_dropped() -> None:
    notes = build_timeline([_placed(4.0, 1.0)])
    assert len(notes) == 1


def test_empty_timeline() -> None:
    assert build_timeline([]) == []


def test_overlap_is_rejected() -> None:
    with pytest.raises(TimelineOverlapError):
        build_timeline([_placed(0.0, 2.0), _placed(1.0, 1.0)])


def test_find_overlap_reports_clash() -> None:
    existing = [_placed(0.0, 1.0), _placed(3.0, 1.0)]
    assert find_overlap(existing, _placed(1.0, 2.0)) is None
    assert find_overlap(existing, _placed(2.5, 1.0)) == existing[1]


def test_check_overlaps_accepts_touching_notes() -> None:
    check_overlaps([_placed(0.0, 1.0), _placed(1.0, 1.0)])


def test_placed_note_end() -> None:
    assert _placed(1.5, 0.25).end == 1.75
