"""Chord transposition.

Roots are shifted around a fixed sharp-spelled chromatic scale; whatever
follows the root (``m7``, ``sus4``, ``maj7``, ``/B`` ...) is kept verbatim.
Flat roots are respelled as sharps first, so ``Bb`` up 2 is ``C`` and
``C`` down 2 is ``A#``.
"""

from collections.abc import Callable

from .models import ChordLine, Song

SCALE = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

_FLAT_TO_SHARP = [
    ("Bb", "A#"),
    ("Db", "C#"),
    ("Eb", "D#"),
    ("Gb", "F#"),
    ("Ab", "G#"),
]

Transposer = Callable[[str, int], str]


def transpose_chord(chord: str, semitones: int) -> str:
    """Return *chord* shifted by *semitones* (negative = down).

    Text that does not start with a root A-G is returned unchanged.

    >>> transpose_chord("Am7", 3)
    'Cm7'
    >>> transpose_chord("C", -1)
    'B'
    """
    for flat, sharp in _FLAT_TO_SHARP:
        chord = chord.replace(flat, sharp)

    if not chord or chord[0] not in "ABCDEFG":
        return chord
    root = chord[:2] if chord[1:2] == "#" else chord[:1]
    suffix = chord[len(root):]
    if root not in SCALE:
        return chord

    index = (SCALE.index(root) + semitones + 12) % 12
    return SCALE[index] + suffix


def transpose_song(song: Song, semitones: int, transposer: Transposer = transpose_chord) -> Song:
    """Apply *transposer* to every chord of every chord line, in place.

    Sections and lines are visited in document order.  Returns *song* so the
    call can be chained.
    """
    for section in song.sections:
        for line in section.lines:
            if isinstance(line, ChordLine) and line.chords:
                line.chords = [transposer(chord, semitones) for chord in line.chords]
    return song
