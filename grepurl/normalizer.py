"""
URL resolution and canonicalization for extracted links.
"""
from __future__ import annotations

import re
import string
from typing import Dict, Iterable, List, Optional
from urllib.parse import SplitResult, quote, urljoin, urlsplit

from grepurl.logger import logger
from grepurl.models import CanonicalURL

__all__ = ["DEFAULT_PORTS", "canonicalize", "normalize_links"]

DEFAULT_PORTS: Dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "gopher": 70,
    "nntp": 119,
    "news": 119,
    "telnet": 23,
    "ldap": 389,
}

_UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")
_ESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_STRAY_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_RE = re.compile(r"[\t\r\n]")

_SUB_DELIMS = "!$&'()*+,;="
_PATH_SAFE = _SUB_DELIMS + ":@/"
_QUERY_SAFE = _PATH_SAFE + "?"


def _decode_unreserved(match: re.Match[str]) -> str:
    char = chr(int(match.group(1), 16))
    return char if char in _UNRESERVED else "%" + match.group(1).upper()


def _normalize_escapes(text: str, safe: str) -> str:
    """Decode escaped unreserved chars, uppercase other escapes, quote the rest."""
    text = _STRAY_PERCENT_RE.sub("%25", text)
    text = _ESCAPE_RE.sub(_decode_unreserved, text)
    return quote(text, safe=safe + "%")


def _remove_dot_segments(path: str) -> str:
    segments = path.split("/")
    output: List[str] = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            # output[0] is the empty segment before the leading slash
            if len(output) > 1:
                output.pop()
            continue
        output.append(segment)
    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def _netloc(parts: SplitResult, scheme: str) -> str:
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        host = f"{host}:{port}"
    if "@" in parts.netloc:
        userinfo = parts.netloc.rpartition("@")[0]
        host = f"{userinfo}@{host}"
    return host


def _canonical(text: str) -> CanonicalURL:
    # urlsplit drops these anyway; removing them first keeps `rest` aligned
    text = _CONTROL_RE.sub("", text)
    parts = urlsplit(text)
    scheme = parts.scheme.lower()
    rest = text[len(parts.scheme) + 1:] if parts.scheme else text
    has_authority = bool(parts.netloc) or rest.startswith("//")

    netloc = _netloc(parts, scheme) if has_authority else ""
    path = _normalize_escapes(parts.path, _PATH_SAFE)
    if has_authority and not path:
        path = "/"
    if (scheme or has_authority) and path.startswith("/"):
        path = _remove_dot_segments(path)
    # "//" right after "scheme:" would re-parse as an authority
    if not has_authority and path.startswith("//"):
        path = "/." + path
    query = _normalize_escapes(parts.query, _QUERY_SAFE)
    fragment = _normalize_escapes(parts.fragment, _QUERY_SAFE)

    url = f"{scheme}:" if scheme else ""
    if has_authority:
        url += "//" + netloc
    url += path
    if query:
        url += "?" + query
    if fragment:
        url += "#" + fragment

    return CanonicalURL(
        scheme=scheme or None,
        host=(parts.hostname or None) if has_authority else None,
        path=path,
        url=url,
    )


def canonicalize(
    raw: str,
    base: Optional[str] = None,
    absolute: bool = False,
) -> Optional[CanonicalURL]:
    """
    Turn a raw link into a :class:`CanonicalURL`.

    With *absolute* set and a *base* available, the link is first resolved
    against *base*; otherwise it is canonicalized on its own and may stay
    relative. Links that cannot be parsed yield ``None``.
    """
    text = raw.strip()
    try:
        if absolute and base:
            text = urljoin(base, text)
        if not text:
            return None
        return _canonical(text)
    except ValueError as exc:
        logger.debug("Dropping malformed link %r: %s", raw, exc)
        return None


def normalize_links(
    raw_links: Iterable[str],
    base: Optional[str] = None,
    absolute: bool = False,
) -> List[CanonicalURL]:
    """Canonicalize every raw link in order, silently skipping malformed ones."""
    urls: List[CanonicalURL] = []
    dropped = 0
    for raw in raw_links:
        url = canonicalize(raw, base=base, absolute=absolute)
        if url is None:
            dropped += 1
            continue
        urls.append(url)
    if dropped:
        logger.debug("Dropped %d malformed links", dropped)
    logger.info("Normalized %d links (absolute=%s, base=%s)", len(urls), absolute, base)
    return urls
