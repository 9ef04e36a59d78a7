# grepurl/source/fetcher.py
"""
Fetcher module: downloads a single document with retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL

from grepurl.exceptions import SourceError
from grepurl.logger import logger
from grepurl.source.models import PageData

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class Fetcher:
    """Handles HTTP fetching with retries/backoff on 5xx and 429."""

    def __init__(
        self,
        session: ClientSession,
        retry_times: int = 2,
        backoff: float = 1.0,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.retry_times = retry_times
        self.backoff = backoff
        self._retry_status = retry_status

    async def fetch(self, url: str) -> PageData:
        """
        Fetch *url* and return its decoded body.

        The returned PageData carries the final URL after redirects.
        Raises SourceError on a 4xx/5xx answer, timeout or network failure.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"Retryable status {resp.status}")
                    if resp.status >= 400:
                        raise SourceError(f"HTTP {resp.status} while fetching {url}")
                    text = await resp.text(errors="replace")
                    return PageData(str(resp.url), text)
            except InvalidURL as exc:
                raise SourceError(f"Invalid URL: {url}") from exc
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise SourceError(f"Timed out while fetching {url}") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.retry_times:
                    raise SourceError(f"Could not fetch {url}: {exc}") from exc
                # exponential backoff, cap at 60s
                delay = min(self.backoff * 2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, delay)
                await asyncio.sleep(delay)


async def fetch_url(
    url: str,
    *,
    timeout: float,
    user_agent: str,
    retry_times: int = 2,
    backoff: float = 1.0,
) -> PageData:
    """Open a session, fetch *url* once (with retries) and close the session."""
    async with ClientSession(
        timeout=ClientTimeout(total=timeout),
        headers={"User-Agent": user_agent},
        raise_for_status=False,
    ) as session:
        return await Fetcher(session, retry_times=retry_times, backoff=backoff).fetch(url)
