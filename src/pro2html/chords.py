"""Inline chord handling for lyric lines.

Two halves of one round trip:

  1. extract_chords() — ``[G]Amazing [D]grace`` → lyrics + (chord, column) pairs
  2. align_chords()   — (chord, column) pairs → a chord row to print above
                        the lyrics
"""

import re

from .models import ChordLine

# Any [token] group; no nesting, interior must be non-empty
CHORD_BRACKET_RE = re.compile(r"\[([^\]]+)\]")


def has_chord_markers(line: str) -> bool:
    """True if *line* should go through :func:`extract_chords`.

    Only the presence of both bracket characters is checked; whether they form
    a valid ``[chord]`` pair is left to the extractor.
    """
    return "[" in line and "]" in line


def extract_chords(line: str) -> ChordLine:
    """Split a lyric line with inline chords into a :class:`ChordLine`.

    Each chord's position is its ``[`` offset in *line* minus the length of
    every ``[chord]`` span before it, so positions index into the stripped
    lyrics rather than the raw line.

    Example::

        extract_chords("[C]This is a [G]chord line")
        # ChordLine(lyrics="This is a chord line", chords=["C", "G"], positions=[0, 10])
    """
    chords: list[str] = []
    positions: list[int] = []
    removed = 0  # characters of [chord] spans stripped so far

    for m in CHORD_BRACKET_RE.finditer(line):
        chords.append(m.group(1))
        positions.append(m.start() - removed)
        removed += len(m.group(0))

    return ChordLine(
        lyrics=CHORD_BRACKET_RE.sub("", line),
        chords=chords,
        positions=positions,
    )


def align_chords(chords: list[str], positions: list[int]) -> str:
    """Build the chord row printed above a lyric line.

    Each chord is padded out to its column.  When a chord would overlap the
    previous one the gap clamps to zero and the two become adjacent.

    Example::

        align_chords(["C", "G"], [0, 10])  # "C         G"
    """
    row = ""
    cursor = 0
    for chord, position in zip(chords, positions):
        row += " " * max(0, position - cursor) + chord
        cursor = position + len(chord)
    return row
