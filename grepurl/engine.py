# File: grepurl/engine.py
"""grepurl.engine: Оркестрация конвейера: источник → ссылки → нормализация → фильтры → уникальность → сортировка."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, TextIO, Union

from grepurl.config import GrepurlConfig
from grepurl.filters import FilterSpec, apply_filters, build_stages
from grepurl.logger import logger
from grepurl.models import CanonicalURL
from grepurl.normalizer import normalize_links
from grepurl.source import Source, default_base, extract_links, read_source
from grepurl.utils import remove_duplicates

__all__ = ["Engine", "reduce_unique", "order_urls", "run_pipeline"]


def reduce_unique(urls: Sequence[Union[CanonicalURL, str]], unique: bool) -> List[str]:
    """Приводит URL к строкам и, если нужно, оставляет только различные значения."""
    values = [str(u) for u in urls]
    return remove_duplicates(values) if unique else values


def order_urls(urls: Sequence[str], ascending: bool = False, descending: bool = False) -> List[str]:
    """Сортирует URL лексикографически; при обоих флагах побеждает сортировка по возрастанию."""
    if ascending:
        return sorted(urls)
    if descending:
        return sorted(urls, reverse=True)
    return list(urls)


def run_pipeline(
    raw_links: Iterable[str],
    config: GrepurlConfig,
    spec: FilterSpec,
    base: Optional[str] = None,
) -> List[str]:
    """Прогоняет сырые ссылки через нормализацию, фильтры, уникальность и сортировку."""
    urls = normalize_links(raw_links, base=base, absolute=config.absolute)
    urls = apply_filters(urls, build_stages(spec))
    values = reduce_unique(urls, config.unique)
    return order_urls(values, ascending=config.sort_ascending, descending=config.sort_descending)


class Engine:
    """Фасад для CLI и тестов: конфигурация, чтение документа и запуск конвейера."""

    def __init__(self, config: GrepurlConfig) -> None:
        """Компилирует фильтры сразу, чтобы ошибка в шаблоне всплыла до чтения источника."""
        self.config = config
        self.spec = FilterSpec.from_config(config)

    def grep(self, html: str, base: Optional[str] = None) -> List[str]:
        """Извлекает и обрабатывает ссылки из готового HTML."""
        base = self.config.base or base
        if self.config.absolute and base is None:
            logger.warning("No base URL available, relative links are left relative")
        links = extract_links(html)
        logger.info("Extracted %d raw links", len(links))
        result = run_pipeline(links, self.config, self.spec, base=base)
        logger.info("%d URLs after filtering", len(result))
        return result

    def run(self, source: Source, stdin: Optional[TextIO] = None) -> List[str]:
        """Читает документ из источника и возвращает итоговый список URL."""
        page = read_source(
            source,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
            retry_times=self.config.retry_times,
            stdin=stdin,
        )
        return self.grep(page.content, default_base(page))
