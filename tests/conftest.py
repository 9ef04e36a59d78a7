# File: tests/conftest.py
from pathlib import Path
from typing import Callable

import pytest

from grepurl.config import GrepurlConfig
from grepurl.logger import configure


@pytest.fixture(autouse=True)
def reset_logging():
    """
    Restore the default console-only logger after each test,
    so handlers bound to CliRunner streams do not leak between tests.
    """
    yield
    configure()


@pytest.fixture()
def sample_html() -> str:
    """
    Document with one relative page link, one external image and a mailto link.
    """
    return (
        "<html><body>"
        '<a href="/page1.html">Page 1</a>'
        '<img src="http://other.com/img.jpg">'
        '<a href="mailto:x@y.com">Mail</a>'
        "</body></html>"
    )


@pytest.fixture()
def html_file(tmp_path, sample_html) -> Path:
    path = tmp_path / "page.html"
    path.write_text(sample_html, encoding="utf-8")
    return path


@pytest.fixture()
def make_config() -> Callable[..., GrepurlConfig]:
    """
    Return a factory building GrepurlConfig from keyword overrides.
    """
    def _make(**overrides) -> GrepurlConfig:
        return GrepurlConfig(**overrides)

    return _make
