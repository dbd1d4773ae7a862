"""HTML renderer for parsed songs.

Renders a :class:`~pro2html.models.Song` to an HTML fragment.

Markup produced
---------------

- title / subtitle          → ``<h1>`` / ``<h2>``
- artist, key, capo, ...    → ``<div class="key">Key: C</div>`` and friends
- Section                   → ``<div class="section chorus">`` plus an optional
                              ``<div class="section-label">``
- ChordLine                 → ``<pre class="chord-line">`` above
                              ``<pre class="lyric-line">``
- abc / ly / svg / textblock → one ``<pre class="abc-content">`` block
- {textfont} and friends    → a leading ``<style>`` element

Every piece of song text is HTML-escaped, including attribute values.

Usage::

    from pro2html.renderer import RenderOptions, render
    html = render(song, RenderOptions(show_chords=False))
"""

import html
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from .chords import align_chords
from .directives import parse_int
from .exceptions import RenderTargetError
from .models import (
    ChordDisplay,
    ChordLine,
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
    Song,
)
from .transpose import Transposer, transpose_song

logger = logging.getLogger(__name__)

# Metadata fields shown under the title, in display order
_METADATA_BLOCKS = (
    "capo",
    "tempo",
    "time",
    "year",
    "album",
    "composer",
    "lyricist",
    "copyright",
    "duration",
)

# formatting category → CSS selector of the markup it styles
_STYLE_SELECTORS = {
    "text": ".lyric-line, .lyric-line-only",
    "chord": ".chord-line",
    "chorus": ".section.chorus",
    "title": "h1",
    "label": ".section-label",
    "tab": ".section.tab",
    "grid": ".section.grid",
}

# formatting property → CSS property, in declaration order
_STYLE_PROPERTIES = (
    ("font", "font-family"),
    ("size", "font-size"),
    ("colour", "color"),
)

_COMMENT_CLASSES = {
    CommentFormat.PLAIN: "comment",
    CommentFormat.ITALIC: "comment comment-italic",
    CommentFormat.BOX: "comment comment-box",
}

_MARKERS: dict[type, str] = {
    PageBreak: '<div class="page-break"></div>',
    PhysicalPageBreak: '<div class="physical-page-break"></div>',
    ColumnBreak: '<div class="column-break"></div>',
    EmptyLine: '<div class="empty-line">&nbsp;</div>',
}


def escape(text: str) -> str:
    """Escape ``& < > " '`` for use in element content or attribute values."""
    return html.escape(text, quote=True)


@dataclass
class RenderOptions:
    show_title: bool = True
    show_subtitle: bool = True
    show_chords: bool = True
    show_comments: bool = True
    show_metadata: bool = True
    # Applied to chord lines when the song carries a {transpose: N} directive
    transpose: Transposer | None = None


class HtmlRenderer:
    """Render a :class:`~pro2html.models.Song` to an HTML fragment."""

    def __init__(self, options: RenderOptions | None = None):
        self.options = options or RenderOptions()

    def render(self, song: Song) -> str:
        """Return HTML for *song*.

        If a transposer is configured and the song has a non-zero
        ``{transpose}`` value, the chords of *song* are rewritten in place
        before rendering, so rendering the same song twice shifts it twice.
        """
        opts = self.options
        parts: list[str] = []

        style = _render_style(song)
        if style:
            parts.append(style)

        # --- Heading block ---
        if opts.show_title and song.title:
            parts.append(f"<h1>{escape(song.title)}</h1>")
        if opts.show_subtitle and song.subtitle:
            parts.append(f"<h2>{escape(song.subtitle)}</h2>")
        if song.artist:
            parts.append(f'<div class="artist">{escape(song.artist)}</div>')
        if song.key:
            parts.append(f'<div class="key">Key: {escape(song.key)}</div>')
        if opts.show_metadata:
            parts.extend(_render_metadata(song))

        semitones = _transpose_amount(song)
        if opts.transpose is not None and semitones:
            logger.debug(f"Transposing chords by {semitones} semitones")
            transpose_song(song, semitones, opts.transpose)

        # --- Section blocks ---
        for section in song.sections:
            parts.append(self._render_section(section, song))

        return "".join(parts)

    def _render_section(self, section: Section, song: Song) -> str:
        kind = section.kind.value
        parts = [f'<div class="section {kind}">']

        if section.is_delegated:
            # Foreign notation is shown as-is, not interpreted
            if section.content:
                parts.append(f'<pre class="{kind}-content">{escape(section.content)}</pre>')
        else:
            if section.label:
                parts.append(f'<div class="section-label">{escape(section.label)}</div>')
            for line in section.lines:
                parts.append(self._render_line(line, song))

        parts.append("</div>")
        return "".join(parts)

    def _render_line(self, line: Line, song: Song) -> str:
        opts = self.options

        if isinstance(line, CommentLine):
            if not opts.show_comments:
                return ""
            return f'<div class="{_COMMENT_CLASSES[line.format]}">{escape(line.content)}</div>'

        if isinstance(line, HighlightLine):
            return f'<div class="highlight">{escape(line.content)}</div>'

        if isinstance(line, ImageLine):
            return (
                f'<div class="image"><img src="{escape(line.src)}" '
                f'style="max-width: {escape(line.scale)};" alt="ChordPro Image" /></div>'
            )

        if isinstance(line, ChordLine):
            if not opts.show_chords:
                return f'<div class="lyric-line-only">{escape(line.lyrics)}</div>'
            chord_row = align_chords(line.chords, line.positions)
            return (
                f'<pre class="chord-line">{escape(chord_row)}</pre>'
                f'<pre class="lyric-line">{escape(line.lyrics)}</pre>'
            )

        if isinstance(line, LyricLine):
            return f'<div class="lyric-line">{escape(line.content)}</div>'

        if isinstance(line, ChorusRef):
            label = f": {escape(line.label)}" if line.label else ""
            return f'<div class="chorus-ref">Chorus{label}</div>'

        if isinstance(line, ChordDisplay):
            definition = song.chord_definitions.get(line.name)
            parts = [
                '<div class="chord-diagram">',
                f'<div class="chord-name">{escape(line.name)}</div>',
            ]
            if definition:
                parts.append(f'<div class="chord-definition">{escape(definition)}</div>')
            parts.append("</div>")
            return "".join(parts)

        return _MARKERS.get(type(line), "")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _transpose_amount(song: Song) -> int:
    """Semitones from ``{transpose}``, or from a ``{meta: transpose="N"}`` string."""
    value = song.metadata.get("transpose")
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        return parse_int(value) or 0
    return value if isinstance(value, int) else 0


def _render_metadata(song: Song) -> list[str]:
    blocks = []
    for name in _METADATA_BLOCKS:
        value = song.metadata.get(name)
        if isinstance(value, str) and value:
            blocks.append(f'<div class="{name}">{name.capitalize()}: {escape(value)}</div>')
    return blocks


def _render_style(song: Song) -> str:
    """Return a ``<style>`` element for the song's font directives, or ""."""
    rules = []
    for category, selector in _STYLE_SELECTORS.items():
        props = song.formatting.get(category) or {}
        declarations = [
            f"{css}: {escape(props[prop])};"
            for prop, css in _STYLE_PROPERTIES
            if props.get(prop)
        ]
        if declarations:
            rules.append(f"{selector} {{ {' '.join(declarations)} }}")
    if not rules:
        return ""
    return "<style>" + "\n".join(rules) + "</style>"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render(song: Song, options: RenderOptions | None = None) -> str:
    """Render *song* to an HTML fragment using *options* (defaults if None)."""
    return HtmlRenderer(options).render(song)


def render_into(song_markup: str, sink, document: BeautifulSoup | None = None):
    """Write rendered markup into *sink* and return the sink.

    *sink* may be:

    - a BeautifulSoup :class:`~bs4.Tag` — its children are replaced by the
      parsed markup;
    - a CSS selector string, resolved with ``document.select_one()``;
    - any object with a ``write(str)`` method (an open file, ``io.StringIO``).

    Raises :class:`~pro2html.exceptions.RenderTargetError` if the sink is
    None, a selector matches nothing (or no *document* was given), or the
    object is none of the above.
    """
    if isinstance(sink, str):
        if document is None:
            raise RenderTargetError(sink)
        resolved = document.select_one(sink)
        if resolved is None:
            raise RenderTargetError(sink)
        sink = resolved

    if isinstance(sink, Tag):
        sink.clear()
        fragment = BeautifulSoup(song_markup, "html.parser")
        for node in list(fragment.contents):
            sink.append(node.extract())
        return sink

    if sink is not None and callable(getattr(sink, "write", None)):
        sink.write(song_markup)
        return sink

    raise RenderTargetError(sink)
