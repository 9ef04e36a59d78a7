# grepurl/source/models.py
"""
Data models for the document sources.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PageData:
    """Holds the location and decoded text of a fetched document."""

    url: str
    content: str
