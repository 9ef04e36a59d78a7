# grepurl/source/link_extractor.py
"""
Link extraction from HTML markup.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

# Link-bearing attributes per element, as in the classic HTML link-element table.
LINK_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "a": ("href",),
    "applet": ("archive", "codebase", "code"),
    "area": ("href",),
    "audio": ("src",),
    "base": ("href",),
    "bgsound": ("src",),
    "blockquote": ("cite",),
    "body": ("background",),
    "del": ("cite",),
    "embed": ("pluginspage", "src"),
    "form": ("action",),
    "frame": ("src", "longdesc"),
    "iframe": ("src", "longdesc"),
    "img": ("src", "lowsrc", "longdesc", "usemap"),
    "input": ("src", "usemap"),
    "ins": ("cite",),
    "link": ("href",),
    "object": ("classid", "codebase", "data", "archive", "usemap"),
    "q": ("cite",),
    "script": ("src",),
    "source": ("src",),
    "table": ("background",),
    "td": ("background",),
    "th": ("background",),
    "tr": ("background",),
    "track": ("src",),
    "video": ("src", "poster"),
}


def extract_links(html: str) -> List[str]:
    """
    Extract raw link targets from HTML in document order.

    Duplicates are kept, empty attribute values are skipped and
    malformed markup is parsed best-effort.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        for attr in LINK_ATTRIBUTES.get(tag.name, ()):
            value = tag.get(attr)
            if not isinstance(value, str):
                continue
            raw = value.strip()
            if raw:
                links.append(raw)
    return links
