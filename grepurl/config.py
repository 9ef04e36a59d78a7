"""
Модуль для загрузки и валидации конфигурации grepurl.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from grepurl import __version__
from grepurl.utils import split_list

DEFAULT_USER_AGENT = f"grepurl/{__version__}"

_LIST_FIELDS = (
    "schemes",
    "exclude_schemes",
    "hosts",
    "exclude_hosts",
    "extensions",
    "exclude_extensions",
)


class GrepurlConfig(BaseModel):
    """Конфигурация одного запуска grepurl."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    verbose: bool = Field(False, description="Подробный вывод (уровень INFO).")
    debug: bool = Field(False, description="Отладочный вывод (уровень DEBUG).")
    absolute: bool = Field(False, description="Приводить ссылки к абсолютному виду относительно базового URL.")
    unique: bool = Field(False, description="Выводить только уникальные URL.")
    sort_ascending: bool = Field(False, description="Сортировать по возрастанию.")
    sort_descending: bool = Field(False, description="Сортировать по убыванию.")

    schemes: Optional[FrozenSet[str]] = Field(None, description="Оставить только эти схемы.")
    exclude_schemes: Optional[FrozenSet[str]] = Field(None, description="Отбросить эти схемы.")
    hosts: Optional[FrozenSet[str]] = Field(None, description="Оставить только эти хосты.")
    exclude_hosts: Optional[FrozenSet[str]] = Field(None, description="Отбросить эти хосты.")
    extensions: Optional[FrozenSet[str]] = Field(None, description="Оставить только эти расширения.")
    exclude_extensions: Optional[FrozenSet[str]] = Field(None, description="Отбросить эти расширения.")

    path: Optional[str] = Field(None, description="Регулярное выражение для пути (оставить).")
    exclude_path: Optional[str] = Field(None, description="Регулярное выражение для пути (отбросить).")
    url_regex: Optional[str] = Field(None, description="Регулярное выражение для всего URL (оставить).")
    exclude_url_regex: Optional[str] = Field(None, description="Регулярное выражение для всего URL (отбросить).")

    base: Optional[str] = Field(None, description="Базовый URL для разрешения относительных ссылок.")
    timeout: float = Field(10.0, gt=0, description="Таймаут загрузки документа (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx/429.")

    @field_validator(*_LIST_FIELDS, mode="before")
    def _split_commas(cls, v: Any) -> Any:
        if isinstance(v, (str, list, tuple, set, frozenset)):
            return frozenset(split_list(v))
        return v

    @field_validator("extensions", "exclude_extensions", mode="after")
    def _strip_leading_dots(cls, v: Optional[FrozenSet[str]]) -> Optional[FrozenSet[str]]:
        if v is None:
            return v
        return frozenset(ext.lstrip(".") for ext in v if ext.lstrip("."))


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path, None]) -> dict[str, Any]:
    """
    Читает YAML или JSON и возвращает словарь настроек.
    Без пути возвращает пустой словарь (значения по умолчанию).
    """
    if path is None:
        return {}
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None]) -> GrepurlConfig:
    """Читает файл конфигурации и возвращает проверенный объект GrepurlConfig."""
    return GrepurlConfig(**read_config_file(path))


def merge_options(file_data: Mapping[str, Any], cli_options: Mapping[str, Any]) -> GrepurlConfig:
    """
    Накладывает явно заданные опции командной строки поверх данных из файла.
    Незаданными считаются None, False и пустой кортеж; пустая строка (например, `-e ""`)
    считается заданной и включает фильтр с пустым набором.
    """
    data: Dict[str, Any] = dict(file_data)
    for key, value in cli_options.items():
        if value is None or value is False or value == ():
            continue
        data[key] = value
    return GrepurlConfig(**data)
