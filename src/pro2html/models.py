from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class SectionKind(Enum):
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    TAB = "tab"
    GRID = "grid"
    ABC = "abc"
    LY = "ly"
    SVG = "svg"
    TEXTBLOCK = "textblock"


# Kinds whose body is foreign notation, kept verbatim in Section.content
DELEGATED_KINDS = frozenset(
    {SectionKind.ABC, SectionKind.LY, SectionKind.SVG, SectionKind.TEXTBLOCK}
)


class CommentFormat(Enum):
    PLAIN = "plain"
    ITALIC = "italic"
    BOX = "box"


# ---------------------------------------------------------------------------
# Line variants
# ---------------------------------------------------------------------------


@dataclass
class CommentLine:
    content: str
    format: CommentFormat = CommentFormat.PLAIN


@dataclass
class HighlightLine:
    content: str


@dataclass
class ImageLine:
    src: str
    scale: str = "100%"


@dataclass
class ChordLine:
    """A lyric line with its inline chords pulled out.

    Example: "[C]This is a [G]chord line" becomes
    lyrics="This is a chord line", chords=["C", "G"], positions=[0, 10].
    Positions index into *lyrics*, i.e. after every ``[chord]`` is removed.
    """

    lyrics: str
    chords: list[str] = field(default_factory=list)
    positions: list[int] = field(default_factory=list)


@dataclass
class LyricLine:
    content: str


@dataclass
class EmptyLine:
    pass


@dataclass
class ChorusRef:
    """``{chorus}`` — repeat a previously defined chorus."""

    label: str = ""


@dataclass
class ChordDisplay:
    """``{chord: Name}`` — show a chord (and its ``{define}``, if any)."""

    name: str


@dataclass
class PageBreak:
    pass


@dataclass
class PhysicalPageBreak:
    pass


@dataclass
class ColumnBreak:
    pass


Line = Union[
    CommentLine,
    HighlightLine,
    ImageLine,
    ChordLine,
    LyricLine,
    EmptyLine,
    ChorusRef,
    ChordDisplay,
    PageBreak,
    PhysicalPageBreak,
    ColumnBreak,
]

# Metadata values: free-form strings, parsed ints (transpose, columns),
# flags (diagrams, grid, titles) and nested maps (chords, formatting).
MetaValue = Union[str, int, bool, dict]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass
class Section:
    """A run of lines sharing one structural kind (verse, chorus, tab, ...)."""

    kind: SectionKind = SectionKind.VERSE
    label: str | None = None  # e.g. "Chorus 1"; None for implicit sections
    lines: list[Line] = field(default_factory=list)
    content: str = ""  # raw body of delegated kinds (abc, ly, svg, textblock)
    in_progress: bool = False  # delegated body still being collected

    @property
    def is_delegated(self) -> bool:
        return self.kind in DELEGATED_KINDS


@dataclass
class Song:
    """Parsed ChordPro document."""

    title: str = ""
    subtitle: str = ""
    artist: str = ""
    key: str = ""
    sections: list[Section] = field(default_factory=lambda: [Section()])
    metadata: dict[str, MetaValue] = field(default_factory=dict)

    @property
    def chord_definitions(self) -> dict[str, str]:
        """``{define}`` entries, chord name → definition string."""
        chords = self.metadata.get("chords")
        return chords if isinstance(chords, dict) else {}

    @property
    def formatting(self) -> dict[str, dict[str, str]]:
        """Font/size/colour settings, category → property → value."""
        formatting = self.metadata.get("formatting")
        return formatting if isinstance(formatting, dict) else {}
