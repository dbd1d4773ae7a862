import logging
import re
import sys
from pathlib import Path

import click
from bs4 import BeautifulSoup

from .exceptions import FetchError, Pro2HtmlError
from .parser import is_chordpro, parse_with_transpose
from .renderer import RenderOptions, render, render_into
from .sources import load_source
from .transpose import transpose_chord

logger = logging.getLogger(__name__)

_DOCUMENT_TEMPLATE = (
    "<!DOCTYPE html>"
    '<html><head><meta charset="utf-8"/><title></title></head>'
    '<body><div id="song"></div></body></html>'
)


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str) -> str:
    stem = "-".join(s for s in (_slugify(artist), _slugify(title)) if s)
    return f"{stem or 'song'}.html"


def _standalone(markup: str, title: str) -> str:
    """Wrap a rendered fragment in a minimal HTML document."""
    document = BeautifulSoup(_DOCUMENT_TEMPLATE, "html.parser")
    document.title.string = title or "Song"
    render_into(markup, "#song", document=document)
    return str(document)


@click.command()
@click.argument("source")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.html)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--transpose", "semitones", default=0, show_default=True, type=int,
              help="Shift every chord by N semitones (negative = down).")
@click.option("--no-chords", is_flag=True, default=False, help="Render lyrics only.")
@click.option("--no-comments", is_flag=True, default=False, help="Leave out {comment} lines.")
@click.option("--no-title", is_flag=True, default=False, help="Leave out the title heading.")
@click.option("--no-subtitle", is_flag=True, default=False, help="Leave out the subtitle heading.")
@click.option("--no-metadata", is_flag=True, default=False,
              help="Leave out capo, tempo, composer and other metadata blocks.")
@click.option("--standalone", is_flag=True, default=False,
              help="Emit a complete HTML document instead of a fragment.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def main(
    source: str,
    output_path: str | None,
    stdout: bool,
    semitones: int,
    no_chords: bool,
    no_comments: bool,
    no_title: bool,
    no_subtitle: bool,
    no_metadata: bool,
    standalone: bool,
    verbose: bool,
) -> None:
    """Convert a ChordPro song to HTML.

    \b
    SOURCE is a .cho / .chordpro file or an http(s) URL.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # --- Load ---
    try:
        text = load_source(source)
    except FetchError as exc:
        msg = f"Error: Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        click.echo(msg, err=True)
        sys.exit(1)
    except Pro2HtmlError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if not is_chordpro(text):
        logger.warning(f"{source} has no directives or chords; rendering as plain lyrics")

    # --- Parse + render ---
    song = parse_with_transpose(text, semitones)
    options = RenderOptions(
        show_title=not no_title,
        show_subtitle=not no_subtitle,
        show_chords=not no_chords,
        show_comments=not no_comments,
        show_metadata=not no_metadata,
        transpose=transpose_chord,
    )
    markup = render(song, options)
    if standalone:
        markup = _standalone(markup, song.title)

    # --- Output ---
    if stdout:
        click.echo(markup)
        return

    dest = Path(output_path) if output_path else Path(_default_filename(song.artist, song.title))
    dest.write_text(markup + "\n", encoding="utf-8")
    click.echo(f"Written to {dest}")
