"""
Filter chain: include/exclude stages applied to canonical URLs.

Stages always run in the same order (scheme, host, extension, path, url),
each include stage before its exclude counterpart. A stage whose option was
not supplied is disabled and passes everything through.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, NamedTuple, Optional, Sequence

from grepurl.config import GrepurlConfig
from grepurl.exceptions import PatternError
from grepurl.logger import logger
from grepurl.models import CanonicalURL

__all__ = ["FilterSpec", "FilterStage", "build_stages", "apply_filters", "compile_pattern"]


def compile_pattern(option: str, pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile a user-supplied pattern, turning :class:`re.error` into :class:`PatternError`."""
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternError(option, pattern, str(exc)) from exc


@dataclass(frozen=True)
class FilterSpec:
    """Resolved filter parameters; ``None`` means the stage is not requested."""

    schemes: Optional[FrozenSet[str]] = None
    exclude_schemes: Optional[FrozenSet[str]] = None
    hosts: Optional[FrozenSet[str]] = None
    exclude_hosts: Optional[FrozenSet[str]] = None
    extensions: Optional[FrozenSet[str]] = None
    exclude_extensions: Optional[FrozenSet[str]] = None
    path: Optional[re.Pattern[str]] = None
    exclude_path: Optional[re.Pattern[str]] = None
    url: Optional[re.Pattern[str]] = None
    exclude_url: Optional[re.Pattern[str]] = None

    @classmethod
    def from_config(cls, config: GrepurlConfig) -> FilterSpec:
        """Build the spec, compiling every pattern up front so bad ones fail fast."""
        return cls(
            schemes=config.schemes,
            exclude_schemes=config.exclude_schemes,
            hosts=config.hosts,
            exclude_hosts=config.exclude_hosts,
            extensions=config.extensions,
            exclude_extensions=config.exclude_extensions,
            path=compile_pattern("path", config.path),
            exclude_path=compile_pattern("exclude-path", config.exclude_path),
            url=compile_pattern("url-regex", config.url_regex),
            exclude_url=compile_pattern("exclude-url-regex", config.exclude_url_regex),
        )


class FilterStage(NamedTuple):
    name: str
    enabled: bool
    keep: Callable[[CanonicalURL], bool]


def _member(values: Optional[FrozenSet[str]], field: Optional[str]) -> bool:
    # an absent field never matches, in either direction
    return field is not None and values is not None and field in values


def _search(pattern: Optional[re.Pattern[str]], field: str) -> bool:
    return pattern is not None and pattern.search(field) is not None


def build_stages(spec: FilterSpec) -> List[FilterStage]:
    """Return the full, fixed-order list of stages with their enabled flags."""
    return [
        FilterStage("scheme include", spec.schemes is not None,
                    lambda u: _member(spec.schemes, u.scheme)),
        FilterStage("scheme exclude", spec.exclude_schemes is not None,
                    lambda u: not _member(spec.exclude_schemes, u.scheme)),
        FilterStage("host include", spec.hosts is not None,
                    lambda u: _member(spec.hosts, u.host)),
        FilterStage("host exclude", spec.exclude_hosts is not None,
                    lambda u: not _member(spec.exclude_hosts, u.host)),
        FilterStage("extension include", spec.extensions is not None,
                    lambda u: _member(spec.extensions, u.extension)),
        FilterStage("extension exclude", spec.exclude_extensions is not None,
                    lambda u: not _member(spec.exclude_extensions, u.extension)),
        FilterStage("path include", spec.path is not None,
                    lambda u: _search(spec.path, u.path)),
        FilterStage("path exclude", spec.exclude_path is not None,
                    lambda u: not _search(spec.exclude_path, u.path)),
        FilterStage("url include", spec.url is not None,
                    lambda u: _search(spec.url, u.url)),
        FilterStage("url exclude", spec.exclude_url is not None,
                    lambda u: not _search(spec.exclude_url, u.url)),
    ]


def apply_filters(urls: Sequence[CanonicalURL], stages: Sequence[FilterStage]) -> List[CanonicalURL]:
    """Run every enabled stage over *urls*, each narrowing the previous output."""
    result = list(urls)
    for stage in stages:
        if not stage.enabled:
            continue
        before = len(result)
        result = [u for u in result if stage.keep(u)]
        logger.debug("Filter %s kept %d of %d URLs", stage.name, len(result), before)
    return result
