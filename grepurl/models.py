"""
Data models shared by the normalizer and the filter chain.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = ["CanonicalURL"]


@dataclass(frozen=True, slots=True)
class CanonicalURL:
    """A parsed, canonical URL.

    ``scheme`` and ``host`` are ``None`` when the URL has none, e.g. for a
    relative reference left unresolved or for ``mailto:`` addresses.
    ``url`` is the full serialized form and is what gets printed.
    """

    scheme: Optional[str]
    host: Optional[str]
    path: str
    url: str

    @property
    def extension(self) -> str:
        """Suffix after the last ``.`` of the final path segment, ``""`` if none."""
        segment = self.path.rsplit("/", 1)[-1]
        if "." not in segment:
            return ""
        return segment.rsplit(".", 1)[-1]

    def __str__(self) -> str:
        return self.url
