# File: grepurl/utils.py
"""grepurl.utils: Утилитарные функции для разбора списков опций и работы с последовательностями URL."""

from __future__ import annotations

from typing import Collection, Iterable, List, Sequence, Union

from grepurl.logger import logger

__all__: Sequence[str] = (
    "split_list",
    "remove_duplicates",
)


def split_list(value: Union[str, Iterable[str]]) -> List[str]:
    """Разбирает список через запятую (или итерируемое из таких строк), пустые элементы отбрасывает."""
    chunks = [value] if isinstance(value, str) else list(value)
    items = [item.strip() for chunk in chunks for item in str(chunk).split(",")]
    return [item for item in items if item]


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок первого вхождения."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
