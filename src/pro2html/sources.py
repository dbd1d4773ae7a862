"""Loading ChordPro text from a local file or a URL."""

import logging
from pathlib import Path

import httpx

from .exceptions import FetchError, SourceNotFoundError

logger = logging.getLogger(__name__)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch(url: str) -> str:
    """GET *url* and return the response body.

    Raises FetchError on transport failures (status 0) and non-200 responses.
    """
    logger.debug(f"Fetching {url}")
    try:
        resp = httpx.get(url, follow_redirects=True, timeout=15)
    except httpx.RequestError as exc:
        raise FetchError(url, 0) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code)
    return resp.text


def read_file(path: str) -> str:
    logger.debug(f"Reading {path}")
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceNotFoundError(path) from exc


def load_source(location: str) -> str:
    """Return ChordPro text from *location*, a file path or http(s) URL."""
    if is_url(location):
        return fetch(location)
    return read_file(location)
