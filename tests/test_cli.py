from unittest.mock import patch

from bs4 import BeautifulSoup
from click.testing import CliRunner

from pro2html.cli import _default_filename, _slugify, main
from pro2html.exceptions import FetchError

SONG = """{title: Amazing Grace}
{artist: John Newton}
{comment: Slowly}
[G]Amazing [D]grace
"""

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_song(tmp_path, text: str = SONG) -> str:
    path = tmp_path / "amazing-grace.cho"
    path.write_text(text, encoding="utf-8")
    return str(path)


# ---------------------------------------------------------------------------
# _slugify / _default_filename
# ---------------------------------------------------------------------------


def test_slugify_basic():
    assert _slugify("Amazing Grace") == "amazing-grace"
    assert _slugify("John Newton") == "john-newton"


def test_slugify_apostrophe():
    assert _slugify("Blowin' in the Wind") == "blowin-in-the-wind"


def test_slugify_collapses_spaces():
    assert _slugify("A  B") == "a-b"


def test_default_filename():
    assert _default_filename("John Newton", "Amazing Grace") == "john-newton-amazing-grace.html"


def test_default_filename_without_artist():
    assert _default_filename("", "Amazing Grace") == "amazing-grace.html"


def test_default_filename_fallback():
    assert _default_filename("", "") == "song.html"


# ---------------------------------------------------------------------------
# --help
# ---------------------------------------------------------------------------


def test_help_output():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Convert a ChordPro song to HTML" in result.output
    assert "--transpose" in result.output


# ---------------------------------------------------------------------------
# --stdout
# ---------------------------------------------------------------------------


def test_stdout_prints_html(tmp_path):
    result = CliRunner().invoke(main, ["--stdout", _write_song(tmp_path)])
    assert result.exit_code == 0
    assert "<h1>Amazing Grace</h1>" in result.output
    assert '<pre class="chord-line">G       D</pre>' in result.output


def test_stdout_does_not_write_file(tmp_path):
    source = _write_song(tmp_path)
    with CliRunner().isolated_filesystem(temp_dir=tmp_path):
        result = CliRunner().invoke(main, ["--stdout", source])
    assert result.exit_code == 0
    assert not any(tmp_path.rglob("*.html"))


def test_render_flags(tmp_path):
    result = CliRunner().invoke(
        main,
        ["--stdout", "--no-chords", "--no-comments", "--no-title", _write_song(tmp_path)],
    )
    assert result.exit_code == 0
    assert "<h1>" not in result.output
    assert "Slowly" not in result.output
    assert '<div class="lyric-line-only">Amazing grace</div>' in result.output


def test_no_metadata_flag(tmp_path):
    source = _write_song(tmp_path, "{capo: 3}\nx")
    result = CliRunner().invoke(main, ["--stdout", "--no-metadata", source])
    assert "Capo" not in result.output


def test_transpose_option(tmp_path):
    result = CliRunner().invoke(main, ["--stdout", "--transpose", "2", _write_song(tmp_path)])
    assert result.exit_code == 0
    assert '<pre class="chord-line">A       E</pre>' in result.output


def test_transpose_directive_honoured(tmp_path):
    source = _write_song(tmp_path, "{transpose: -2}\n[D]word")
    result = CliRunner().invoke(main, ["--stdout", source])
    assert '<pre class="chord-line">C</pre>' in result.output


def test_standalone_document(tmp_path):
    result = CliRunner().invoke(main, ["--stdout", "--standalone", _write_song(tmp_path)])
    assert result.exit_code == 0
    document = BeautifulSoup(result.output, "html.parser")
    assert document.title.get_text() == "Amazing Grace"
    assert document.select_one("#song h1").get_text() == "Amazing Grace"


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


def test_output_file_written_with_flag(tmp_path):
    out_file = tmp_path / "song.html"
    result = CliRunner().invoke(main, ["-o", str(out_file), _write_song(tmp_path)])
    assert result.exit_code == 0
    assert out_file.exists()
    assert "<h1>Amazing Grace</h1>" in out_file.read_text()


def test_default_filename_derived_from_artist_and_title(tmp_path):
    source = _write_song(tmp_path)
    with CliRunner().isolated_filesystem(temp_dir=tmp_path):
        result = CliRunner().invoke(main, [source])
    assert result.exit_code == 0
    assert "john-newton-amazing-grace.html" in result.output


# ---------------------------------------------------------------------------
# URL sources
# ---------------------------------------------------------------------------


def test_url_source_loaded():
    with patch("pro2html.cli.load_source", return_value=SONG) as load:
        result = CliRunner().invoke(main, ["--stdout", "https://example.com/grace.cho"])
    assert result.exit_code == 0
    load.assert_called_once_with("https://example.com/grace.cho")
    assert "<h1>Amazing Grace</h1>" in result.output


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def test_missing_file_exits_nonzero(tmp_path):
    result = CliRunner().invoke(main, ["--stdout", str(tmp_path / "missing.cho")])
    assert result.exit_code != 0
    assert "Error" in result.output


def test_fetch_error_exits_nonzero():
    with patch(
        "pro2html.cli.load_source",
        side_effect=FetchError("https://example.com/grace.cho", 404),
    ):
        result = CliRunner().invoke(main, ["--stdout", "https://example.com/grace.cho"])
    assert result.exit_code != 0
    assert "404" in result.output


def test_plain_text_still_rendered(tmp_path):
    source = _write_song(tmp_path, "just some words")
    result = CliRunner().invoke(main, ["--stdout", source])
    assert result.exit_code == 0
    assert '<div class="lyric-line">just some words</div>' in result.output
