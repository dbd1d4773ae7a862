class Pro2HtmlError(Exception):
    """Base exception for pro2html."""


class FetchError(Pro2HtmlError):
    """Raised when an HTTP request for a ChordPro source fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class SourceNotFoundError(Pro2HtmlError):
    """Raised when a local ChordPro source cannot be read."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot read ChordPro file: {path}")


class RenderTargetError(Pro2HtmlError):
    """Raised when rendered markup has nowhere to go."""

    def __init__(self, target: object):
        self.target = target
        super().__init__(f"Invalid render target: {target!r}")
