# === FILE: grepurl/cli.py ===
#!/usr/bin/env python3
"""
Точка входа grepurl: извлечь URL из HTML-документа и отфильтровать их.

Источник (ровно один):
  --url, -r URL          Загрузить документ по URL
  --file, -f PATH        Прочитать локальный файл
  --stdin, -i            Прочитать стандартный ввод

Фильтры (списки через запятую):
  -s / -S   схемы (оставить / отбросить)
  -h / -H   хосты (оставить / отбросить)
  -e / -E   расширения (оставить / отбросить)

Фильтры (регулярные выражения):
  -p / -P   путь (оставить / отбросить)
  -u / -U   весь URL (оставить / отбросить)

Прочее:
  --absolute, -a         Разрешать относительные ссылки относительно базового URL
  --unique, -q           Только уникальные URL
  --sort, -b             Сортировать по возрастанию (имеет приоритет над -B)
  --reverse-sort, -B     Сортировать по убыванию
  --config, -c PATH      YAML/JSON с теми же настройками
  --verbose, -v / --debug, -d

Пример:
  grepurl --url http://example.com/ -a -e jpg,png -q -b
"""
import sys
from pathlib import Path

import click

from grepurl import __version__
from grepurl.config import merge_options, read_config_file
from grepurl.engine import Engine
from grepurl.exceptions import GrepurlError
from grepurl.logger import configure, level_for
from grepurl.source import Source

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', message='grepurl, version %(version)s')
@click.option('--url', '-r', 'url', default=None, metavar='URL', help='Загрузить документ по URL.')
@click.option(
    '--file', '-f', 'file',
    default=None,
    type=click.Path(dir_okay=False),
    help='Прочитать документ из локального файла.'
)
@click.option('--stdin', '-i', 'stdin', is_flag=True, help='Прочитать документ со стандартного ввода.')
@click.option('--absolute', '-a', is_flag=True, help='Приводить ссылки к абсолютному виду.')
@click.option('--unique', '-q', is_flag=True, help='Выводить только уникальные URL.')
@click.option('--sort', '-b', 'sort_ascending', is_flag=True, help='Сортировать по возрастанию.')
@click.option('--reverse-sort', '-B', 'sort_descending', is_flag=True, help='Сортировать по убыванию.')
@click.option('--verbose', '-v', is_flag=True, help='Подробный вывод в stderr.')
@click.option('--debug', '-d', is_flag=True, help='Отладочный вывод в stderr.')
@click.option('--schemes', '-s', default=None, help='Оставить только эти схемы (через запятую).')
@click.option('--exclude-schemes', '-S', default=None, help='Отбросить эти схемы (через запятую).')
@click.option('--hosts', '-h', default=None, help='Оставить только эти хосты (через запятую).')
@click.option('--exclude-hosts', '-H', default=None, help='Отбросить эти хосты (через запятую).')
@click.option('--extensions', '-e', default=None, help='Оставить только эти расширения (через запятую).')
@click.option('--exclude-extensions', '-E', default=None, help='Отбросить эти расширения (через запятую).')
@click.option('--path', '-p', 'path', default=None, help='Оставить URL, путь которых совпадает с шаблоном.')
@click.option('--exclude-path', '-P', default=None, help='Отбросить URL, путь которых совпадает с шаблоном.')
@click.option('--url-regex', '-u', default=None, help='Оставить URL, совпадающие с шаблоном.')
@click.option('--exclude-url-regex', '-U', default=None, help='Отбросить URL, совпадающие с шаблоном.')
@click.option('--base', default=None, metavar='URL', help='Базовый URL (по умолчанию адрес документа).')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--timeout', type=float, default=None, help='Таймаут загрузки документа (секунд).')
@click.option('--user-agent', default=None, help='Заголовок User-Agent.')
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Дополнительно писать логи в файл.'
)
def cli(url, file, stdin, config_path, log_file, **options):
    """Извлечь ссылки из HTML-документа и вывести по одной на строку."""
    try:
        source = Source.from_options(url, file, stdin)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        cfg = merge_options(read_config_file(config_path), options)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    configure(level=level_for(verbose=cfg.verbose, debug=cfg.debug), log_file=log_file)

    try:
        urls = Engine(cfg).run(source)
    except GrepurlError as e:
        print_error(str(e))

    if urls:
        click.echo("\n".join(urls))


if __name__ == "__main__":
    cli()
