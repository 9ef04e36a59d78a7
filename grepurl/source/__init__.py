"""grepurl.source: where the document comes from (URL, local file or stdin) and how links are pulled out of it."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, TextIO

import click

from grepurl.exceptions import SourceError
from grepurl.logger import logger
from grepurl.source.fetcher import fetch_url
from grepurl.source.link_extractor import extract_links
from grepurl.source.models import PageData

__all__ = [
    "Source",
    "SourceKind",
    "PageData",
    "read_source",
    "default_base",
    "extract_links",
]

NO_TEXT_MESSAGE = "There is no text!"


class SourceKind(str, Enum):
    URL = "url"
    FILE = "file"
    STDIN = "stdin"


@dataclass(frozen=True, slots=True)
class Source:
    """Exactly one place to read the document from."""

    kind: SourceKind
    location: Optional[str] = None

    @classmethod
    def from_options(cls, url: Optional[str], file: Optional[str], stdin: bool) -> Source:
        chosen = [name for name, value in (("url", url), ("file", file), ("stdin", stdin)) if value]
        if len(chosen) != 1:
            raise ValueError("exactly one of --url, --file or --stdin is required")
        if url:
            return cls(SourceKind.URL, url)
        if file:
            return cls(SourceKind.FILE, file)
        return cls(SourceKind.STDIN)


def _read_file(location: str) -> PageData:
    path = Path(location).expanduser()
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    return PageData(path.resolve().as_uri(), text)


def read_source(
    source: Source,
    *,
    timeout: float = 10.0,
    user_agent: str = "grepurl",
    retry_times: int = 2,
    stdin: Optional[TextIO] = None,
) -> PageData:
    """
    Return the document for *source*.

    Raises SourceError when the source cannot be read or yields no text.
    """
    if source.kind is SourceKind.URL:
        page = asyncio.run(
            fetch_url(
                str(source.location),
                timeout=timeout,
                user_agent=user_agent,
                retry_times=retry_times,
            )
        )
    elif source.kind is SourceKind.FILE:
        page = _read_file(str(source.location))
    else:
        if stdin is not None:
            text = stdin.read()
        else:
            text = click.get_binary_stream("stdin").read().decode("utf-8", errors="replace")
        page = PageData("", text)

    if not page.content or not page.content.strip():
        raise SourceError(NO_TEXT_MESSAGE)
    logger.info("Read %d characters from %s", len(page.content), page.url or "stdin")
    return page


def default_base(page: PageData) -> Optional[str]:
    """Base URL for absolute resolution when none is configured: the page location, if any."""
    return page.url or None
