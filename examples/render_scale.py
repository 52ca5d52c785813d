"""Render a C major scale placed on a timeline, with a one-beat pause before the top note."""

from pathlib import Path

import curvetone as ct

STEPS = ["C4", "D4", "E4", "F4", "G4", "A4", "B4"]

placed = [
    ct.PlacedNote(note=ct.Note.from_name(name, amplitude=0.7), start=float(beat))
    for beat, name in enumerate(STEPS)
]
placed.append(ct.PlacedNote(note=ct.Note.from_name("C5", beats=2.0, amplitude=0.7), start=8.0))

score = ct.Score.from_timeline(placed, bpm=140, control_points=[0.0, 1.0, -1.0, 0.0])
ct.dump_score(score, Path("scale.json"))
Path("scale.wav").write_bytes(score.render())
