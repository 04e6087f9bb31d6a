"""Rendered artifact — the PDF payload handed back to the caller."""

import re
from dataclasses import dataclass
from urllib.parse import quote

DEFAULT_FILENAME = "document"

# Quotes, backslashes and control characters cannot appear inside a quoted header parameter
_UNSAFE_FILENAME_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


def derive_filename(path: str, filename: str | None = None) -> str:
    """Build the download filename for an exported page.

    An explicit ``filename`` wins. Otherwise every ``/`` in the request path
    becomes ``-`` and the leading separator is dropped, so ``/guides/setup``
    yields ``guides-setup.pdf`` and ``/`` yields ``document.pdf``.
    Characters that would break a ``Content-Disposition`` header are removed.
    """
    if filename and filename.strip():
        stem = filename.strip()
        if stem.lower().endswith(".pdf"):
            stem = stem[:-4]
    else:
        stem = path.replace("/", "-")
        if stem.startswith("-"):
            stem = stem[1:]
    stem = _UNSAFE_FILENAME_CHARS.sub("", stem).strip()
    return f"{stem or DEFAULT_FILENAME}.pdf"


@dataclass(frozen=True)
class RenderedArtifact:
    """Single-page PDF produced by one export request."""

    content: bytes
    filename: str
    source_url: str
    content_height: float
    page_height: float

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def content_disposition(self) -> str:
        """``attachment`` header value; non-ASCII names get an RFC 5987 ``filename*``."""
        if self.filename.isascii():
            return f'attachment; filename="{self.filename}"'
        fallback = self.filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quote(self.filename, safe='')}"
