# Test-suite for document sources: link extraction, files, stdin and HTTP fetching
from __future__ import annotations

import io
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from grepurl.exceptions import SourceError
from grepurl.source import PageData, Source, SourceKind, default_base, extract_links, read_source
from grepurl.source.fetcher import fetch_url


# --------------------------------------------------------------------------- #
#                               Link extraction                               #
# --------------------------------------------------------------------------- #


def test_extract_links_in_document_order_with_duplicates():
    html = (
        '<html><head><link rel="stylesheet" href="/style.css">'
        '<script src="/app.js"></script></head>'
        '<body background="/bg.png">'
        '<a href="/a">A</a><img src="/i.png" longdesc="/desc.html">'
        '<form action="/search"><input type="image" src="/go.png"></form>'
        '<iframe src="/frame.html"></iframe>'
        '<a href="/a">A again</a>'
        "</body></html>"
    )
    assert extract_links(html) == [
        "/style.css",
        "/app.js",
        "/bg.png",
        "/a",
        "/i.png",
        "/desc.html",
        "/search",
        "/go.png",
        "/frame.html",
        "/a",
    ]


def test_extract_links_skips_empty_and_missing_attributes():
    html = '<a>no href</a><a href="">empty</a><a href="  /trimmed  ">t</a><img alt="x">'
    assert extract_links(html) == ["/trimmed"]


def test_extract_links_tolerates_broken_markup():
    html = '<div><a href="/one">one<p><a href=/two>two</div></span><img src="/three.gif"'
    links = extract_links(html)
    assert links[:2] == ["/one", "/two"]


def test_extract_links_no_links():
    assert extract_links("<p>plain text only</p>") == []


# --------------------------------------------------------------------------- #
#                          Source selection and reading                       #
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    "url,file,stdin,kind",
    [
        ("http://example.com/", None, False, SourceKind.URL),
        (None, "page.html", False, SourceKind.FILE),
        (None, None, True, SourceKind.STDIN),
    ],
)
def test_source_from_options(url, file, stdin, kind):
    assert Source.from_options(url, file, stdin).kind is kind


@pytest.mark.parametrize(
    "url,file,stdin",
    [
        (None, None, False),
        ("http://example.com/", "page.html", False),
        ("http://example.com/", None, True),
    ],
)
def test_source_from_options_requires_exactly_one(url, file, stdin):
    with pytest.raises(ValueError):
        Source.from_options(url, file, stdin)


def test_read_file_source(html_file, sample_html):
    page = read_source(Source(SourceKind.FILE, str(html_file)))
    assert page.content == sample_html
    assert page.url == html_file.resolve().as_uri()
    assert default_base(page) == page.url


def test_read_missing_file_raises_source_error(tmp_path):
    with pytest.raises(SourceError):
        read_source(Source(SourceKind.FILE, str(tmp_path / "missing.html")))


def test_read_stdin_source():
    page = read_source(Source(SourceKind.STDIN), stdin=io.StringIO('<a href="/x">x</a>'))
    assert page == PageData("", '<a href="/x">x</a>')
    assert default_base(page) is None


@pytest.mark.parametrize("text", ["", "   \n\t"])
def test_blank_stdin_has_no_text(text):
    with pytest.raises(SourceError, match="There is no text!"):
        read_source(Source(SourceKind.STDIN), stdin=io.StringIO(text))


# --------------------------------------------------------------------------- #
#                                HTTP fetching                                #
# --------------------------------------------------------------------------- #


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def http_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()
    calls = {"flaky": 0}

    async def handle_root(_):
        return web.Response(text='<a href="/page1">Page1</a>', content_type="text/html")

    async def handle_agent(request):
        return web.Response(text=request.headers.get("User-Agent", ""), content_type="text/plain")

    async def handle_redirect(_):
        raise web.HTTPFound("/docs/")

    async def handle_docs(_):
        return web.Response(text='<a href="intro.html">Intro</a>', content_type="text/html")

    async def handle_flaky(_):
        calls["flaky"] += 1
        if calls["flaky"] <= 2:
            return web.Response(status=500)
        return web.Response(text="<h1>Recover</h1>", content_type="text/html")

    async def handle_broken(_):
        return web.Response(status=503)

    app.router.add_get("/", handle_root)
    app.router.add_get("/agent", handle_agent)
    app.router.add_get("/old", handle_redirect)
    app.router.add_get("/docs/", handle_docs)
    app.router.add_get("/flaky", handle_flaky)
    app.router.add_get("/broken", handle_broken)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_fetch_url_returns_page(http_server: str):
    page = await fetch_url(f"{http_server}/", timeout=5.0, user_agent="TestAgent/1.0")
    assert page.url == f"{http_server}/"
    assert 'href="/page1"' in page.content


@pytest.mark.asyncio()
async def test_fetch_url_sends_user_agent(http_server: str):
    page = await fetch_url(f"{http_server}/agent", timeout=5.0, user_agent="TestAgent/1.0")
    assert page.content == "TestAgent/1.0"


@pytest.mark.asyncio()
async def test_fetch_url_reports_final_url_after_redirect(http_server: str):
    page = await fetch_url(f"{http_server}/old", timeout=5.0, user_agent="TestAgent/1.0")
    assert page.url == f"{http_server}/docs/"


@pytest.mark.asyncio()
async def test_fetch_url_404_raises_source_error(http_server: str):
    with pytest.raises(SourceError, match="404"):
        await fetch_url(f"{http_server}/missing", timeout=5.0, user_agent="TestAgent/1.0")


@pytest.mark.asyncio()
async def test_fetch_url_retries_server_errors(http_server: str):
    page = await fetch_url(
        f"{http_server}/flaky",
        timeout=5.0,
        user_agent="TestAgent/1.0",
        retry_times=3,
        backoff=0,
    )
    assert "Recover" in page.content


@pytest.mark.asyncio()
async def test_fetch_url_gives_up_after_retries(http_server: str):
    with pytest.raises(SourceError, match="503"):
        await fetch_url(
            f"{http_server}/broken",
            timeout=5.0,
            user_agent="TestAgent/1.0",
            retry_times=1,
            backoff=0,
        )


@pytest.mark.asyncio()
async def test_fetch_url_connection_refused(unused_tcp_port: int):
    with pytest.raises(SourceError):
        await fetch_url(
            f"http://127.0.0.1:{unused_tcp_port}/",
            timeout=5.0,
            user_agent="TestAgent/1.0",
            retry_times=0,
        )
