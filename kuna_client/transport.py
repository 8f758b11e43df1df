from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from kuna_client.errors import TransportError
from kuna_client.settings import HTTP_TIMEOUT_S


log = logging.getLogger("kuna_client.transport")


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: str
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    async def get(self, url: str) -> TransportResponse:
        ...

    async def post(self, url: str) -> TransportResponse:
        ...


class RequestsTransport:
    """``requests``-backed transport.

    The blocking call runs in a worker thread via ``asyncio.to_thread`` so
    concurrent client calls do not hold up the event loop. Status codes are
    returned as-is; deciding what counts as failure is the caller's job.
    """

    def __init__(self, timeout_s: float | None = None, session: Optional[requests.Session] = None) -> None:
        self.timeout_s = HTTP_TIMEOUT_S if timeout_s is None else float(timeout_s)
        self._session = session

    def _request(self, method: str, url: str) -> TransportResponse:
        http = self._session if self._session is not None else requests
        try:
            if method == "POST":
                resp = http.post(url, data=b"", timeout=self.timeout_s)
            else:
                resp = http.get(url, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc
        log.debug("%s %s -> %s", method, url, resp.status_code)
        return TransportResponse(status=resp.status_code, body=resp.text, url=url)

    async def get(self, url: str) -> TransportResponse:
        return await asyncio.to_thread(self._request, "GET", url)

    async def post(self, url: str) -> TransportResponse:
        return await asyncio.to_thread(self._request, "POST", url)
