"""ChordPro text → :class:`~pro2html.models.Song`.

The parser is a single pass over the input lines.  :class:`SongBuilder` keeps
the song being built; its *current section* is always the last entry of
``song.sections`` and is the only section that ever receives lines.  Earlier
sections are never reopened.

Each line takes exactly one of these paths, checked in order:

  1. Directive (``{name: value}``)   → handler from the dispatch table
  2. Inside an unfinished delegated  → appended verbatim to section.content
     section (abc / ly / svg / textblock)
  3. Contains ``[`` and ``]``        → :class:`~pro2html.models.ChordLine`
  4. Blank                           → :class:`~pro2html.models.EmptyLine`
  5. Anything else                   → :class:`~pro2html.models.LyricLine`

Nothing here raises on malformed input: a broken directive is simply not a
directive and falls through to paths 3-5, unknown directives are kept as
opaque metadata, and unparseable numbers fall back to defaults.

Usage::

    from pro2html.parser import parse
    song = parse("{title: Amazing Grace}\\n[G]Amazing [D]grace")
    song.sections[0].lines[0].chords  # ["G", "D"]
"""

import logging
import re
from collections.abc import Callable

from .chords import extract_chords, has_chord_markers
from .directives import Directive, match_directive, parse_int
from .models import (
    ChordDisplay,
    ChorusRef,
    ColumnBreak,
    CommentFormat,
    CommentLine,
    EmptyLine,
    HighlightLine,
    ImageLine,
    Line,
    LyricLine,
    PageBreak,
    PhysicalPageBreak,
    Section,
    SectionKind,
    Song,
)
from .transpose import transpose_song

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Directive tables
# ---------------------------------------------------------------------------

# Free-form fields copied into song.metadata under their own name
_META_FIELDS = (
    "sorttitle",
    "composer",
    "lyricist",
    "copyright",
    "album",
    "year",
    "time",
    "tempo",
    "duration",
    "capo",
)

_COMMENT_FORMATS = {
    "comment": CommentFormat.PLAIN,
    "c": CommentFormat.PLAIN,
    "comment_italic": CommentFormat.ITALIC,
    "ci": CommentFormat.ITALIC,
    "comment_box": CommentFormat.BOX,
    "cb": CommentFormat.BOX,
}

_SECTION_STARTS = {
    "start_of_chorus": SectionKind.CHORUS,
    "soc": SectionKind.CHORUS,
    "start_of_verse": SectionKind.VERSE,
    "sov": SectionKind.VERSE,
    "start_of_bridge": SectionKind.BRIDGE,
    "sob": SectionKind.BRIDGE,
    "start_of_tab": SectionKind.TAB,
    "sot": SectionKind.TAB,
    "start_of_grid": SectionKind.GRID,
    "sog": SectionKind.GRID,
}

_SECTION_ENDS = (
    "end_of_chorus",
    "eoc",
    "end_of_verse",
    "eov",
    "end_of_bridge",
    "eob",
    "end_of_tab",
    "eot",
    "end_of_grid",
    "eog",
)

_DELEGATED_STARTS = ("start_of_abc", "start_of_ly", "start_of_svg", "start_of_textblock")
_DELEGATED_ENDS = ("end_of_abc", "end_of_ly", "end_of_svg", "end_of_textblock")

_FORMAT_CATEGORIES = ("chord", "chorus", "footer", "grid", "tab", "label", "toc", "text", "title")
_FORMAT_ABBREVIATIONS = ("cf", "cs", "tf", "ts")
_FORMAT_DIRECTIVES = (
    tuple(
        f"{category}{prop}"
        for category in _FORMAT_CATEGORIES
        for prop in ("font", "size", "colour", "color")
    )
    + _FORMAT_ABBREVIATIONS
)
_FORMAT_SUFFIX_RE = re.compile(r"font|size|colour")

_BREAKS: dict[str, type] = {
    "new_page": PageBreak,
    "np": PageBreak,
    "new_physical_page": PhysicalPageBreak,
    "npp": PhysicalPageBreak,
    "column_break": ColumnBreak,
    "colb": ColumnBreak,
}

# {define: Am base-fret 1 frets x 0 2 2 1 0}
_DEFINE_RE = re.compile(r"^(\S+)\s+(.*)$")

# Metadata keys holding maps built by {define} and the font directives
_NESTED_KEYS = ("chords", "formatting")

Handler = Callable[..., None]  # (SongBuilder, Directive) -> None
_DISPATCH: dict[str, Handler] = {}


def _handles(*names: str) -> Callable[[Handler], Handler]:
    """Register the decorated method as the handler for each base name."""

    def register(fn: Handler) -> Handler:
        for name in names:
            _DISPATCH[name] = fn
        return fn

    return register


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class SongBuilder:
    """Accumulates a :class:`Song` one input line at a time."""

    def __init__(self) -> None:
        self.song = Song()

    @property
    def current(self) -> Section:
        return self.song.sections[-1]

    def feed(self, line: str) -> None:
        directive = match_directive(line)
        if directive is not None:
            self.apply(directive)
        elif self.current.in_progress:
            section = self.current
            if section.content:
                section.content += "\n"
            section.content += line
        elif has_chord_markers(line):
            self._append(extract_chords(line))
        elif not line.strip():
            self._append(EmptyLine())
        else:
            self._append(LyricLine(content=line))

    def apply(self, directive: Directive) -> None:
        """Dispatch *directive* on its base name."""
        handler = _DISPATCH.get(directive.base, SongBuilder._unknown)
        handler(self, directive)

    # --- helpers ---

    def _append(self, line: Line) -> None:
        self.current.lines.append(line)

    def _open(self, kind: SectionKind, label: str | None = None, **kwargs) -> None:
        self.song.sections.append(Section(kind=kind, label=label, **kwargs))

    def _store(self, name: str, value: str) -> None:
        """Set a free-form metadata field; the nested maps are off limits."""
        if name in _NESTED_KEYS:
            logger.debug(f"Ignoring {name!r}={value!r}: reserved for {{define}}/font directives")
            return
        self.song.metadata[name] = value

    def _nested(self, name: str) -> dict:
        """Return the nested map stored under *name*, creating it if needed."""
        nested = self.song.metadata.get(name)
        if not isinstance(nested, dict):
            nested = self.song.metadata[name] = {}
        return nested

    # --- title / identity ---

    @_handles("title", "t")
    def _title(self, d: Directive) -> None:
        self.song.title = d.value

    @_handles("subtitle", "st")
    def _subtitle(self, d: Directive) -> None:
        self.song.subtitle = d.value

    @_handles("artist")
    def _artist(self, d: Directive) -> None:
        self.song.artist = d.value

    @_handles("key")
    def _key(self, d: Directive) -> None:
        self.song.key = d.value

    @_handles(*_META_FIELDS)
    def _meta_field(self, d: Directive) -> None:
        self.song.metadata[d.base] = d.value

    @_handles("meta")
    def _meta(self, d: Directive) -> None:
        for name, value in d.attributes.items():
            self._store(name, value)

    # --- inline annotations ---

    @_handles(*_COMMENT_FORMATS)
    def _comment(self, d: Directive) -> None:
        self._append(CommentLine(content=d.value, format=_COMMENT_FORMATS[d.base]))

    @_handles("highlight")
    def _highlight(self, d: Directive) -> None:
        self._append(HighlightLine(content=d.value))

    @_handles("image")
    def _image(self, d: Directive) -> None:
        self._append(
            ImageLine(
                src=d.attributes.get("src") or d.value,
                scale=d.attributes.get("scale") or "100%",
            )
        )

    @_handles("chorus")
    def _chorus_ref(self, d: Directive) -> None:
        self._append(ChorusRef(label=d.value))

    @_handles("chord")
    def _chord_display(self, d: Directive) -> None:
        self._append(ChordDisplay(name=d.value))

    @_handles(*_BREAKS)
    def _break(self, d: Directive) -> None:
        self._append(_BREAKS[d.base]())

    # --- sections ---

    @_handles(*_SECTION_STARTS)
    def _start_section(self, d: Directive) -> None:
        label = d.attributes.get("label") or d.value or ""
        self._open(_SECTION_STARTS[d.base], label=label)

    @_handles(*_SECTION_ENDS)
    def _end_section(self, d: Directive) -> None:
        self._open(SectionKind.VERSE)

    @_handles(*_DELEGATED_STARTS)
    def _start_delegated(self, d: Directive) -> None:
        kind = SectionKind(d.base.removeprefix("start_of_"))
        self._open(kind, content="", in_progress=True)

    @_handles(*_DELEGATED_ENDS)
    def _end_delegated(self, d: Directive) -> None:
        if self.current.in_progress:
            self.current.in_progress = False
        self._open(SectionKind.VERSE)

    # --- chords ---

    @_handles("define")
    def _define(self, d: Directive) -> None:
        m = _DEFINE_RE.match(d.value)
        if not m:
            logger.debug(f"Dropping malformed chord definition: {d.value!r}")
            return
        self._nested("chords")[m.group(1)] = m.group(2)

    @_handles("transpose")
    def _transpose(self, d: Directive) -> None:
        self.song.metadata["transpose"] = parse_int(d.value) or 0

    # --- fonts, sizes, colours ---

    @_handles(*_FORMAT_DIRECTIVES)
    def _format(self, d: Directive) -> None:
        name = d.base
        if name.endswith("color"):
            name = name[: -len("color")] + "colour"
        category = _FORMAT_SUFFIX_RE.sub("", name)
        # Abbreviations (cf, ts, ...) have no suffix and land under ""
        prop = name.replace(category, "", 1)
        self._nested("formatting").setdefault(category, {})[prop] = d.value

    # --- output control ---

    @_handles("new_song", "ns")
    def _new_song(self, d: Directive) -> None:
        logger.debug("Ignoring {new_song}: one song per document")

    @_handles("pagetype")
    def _pagetype(self, d: Directive) -> None:
        self.song.metadata["pagetype"] = d.value

    @_handles("columns", "col")
    def _columns(self, d: Directive) -> None:
        self.song.metadata["columns"] = parse_int(d.value) or 1

    @_handles("diagrams")
    def _diagrams(self, d: Directive) -> None:
        if d.value:
            self.song.metadata["diagrams"] = d.value.lower() == "true"

    @_handles("grid", "g")
    def _grid(self, d: Directive) -> None:
        if d.value:
            self.song.metadata["grid"] = d.value.lower() == "true"

    @_handles("no_grid", "ng")
    def _no_grid(self, d: Directive) -> None:
        self.song.metadata["grid"] = False

    @_handles("titles")
    def _titles(self, d: Directive) -> None:
        self.song.metadata["titles"] = d.value == "" or d.value.lower() == "true"

    # --- fallback ---

    def _unknown(self, d: Directive) -> None:
        if not d.base.startswith("x_"):
            logger.debug(f"Unknown directive {d.base!r}, storing as metadata")
        self._store(d.base, d.value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse(text: str) -> Song:
    """Parse ChordPro *text* into a :class:`Song`.

    The returned song always has at least one section: an implicit, unlabeled
    verse that collects everything before the first section directive.
    """
    builder = SongBuilder()
    for line in text.split("\n"):
        builder.feed(line)
    return builder.song


def parse_with_transpose(text: str, semitones: int) -> Song:
    """Parse *text*, then shift every chord by *semitones* before returning."""
    song = parse(text)
    if semitones:
        transpose_song(song, semitones)
    return song


def is_chordpro(text: str) -> bool:
    """Cheap check for ChordPro syntax: a ``{directive}`` or a ``[chord]``.

    Not a validator; plain prose with a bracketed aside passes too.
    """
    return bool(re.search(r"\{.*\}", text) or re.search(r"\[.*\]", text))
