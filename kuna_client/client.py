"""Async client for the Kuna v2 REST API.

Public market data needs no credentials. Account endpoints are signed with
the access/secret key pair given at construction; calling one without keys
raises ``ConfigurationError`` before anything is sent.

    client = KunaClient(access_key, secret_key)
    ticker = await client.get_ticker("btcuah")
    order = await client.new_order("buy", 0.01, "btcuah", 1_500_000)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional
from urllib.parse import quote

from kuna_client import auth_query
from kuna_client.auth_query import SignedEndpoint, build_signed_request
from kuna_client.errors import MalformedInputError, MalformedResponseError, TransportError
from kuna_client.mapper import (
    map_order,
    map_order_book,
    map_orders,
    map_ticker,
    map_tickers,
    map_trades,
    map_user_info,
    to_int,
)
from kuna_client.nonce import NonceProvider, now_ms
from kuna_client.settings import DEFAULT_BASE_URL, ClientConfig
from kuna_client.transport import RequestsTransport, Transport
from kuna_client.types import Credentials, MappingIssue, Order, OrderBook, Ticker, Trade, UserInfo


log = logging.getLogger("kuna_client.client")

ORDER_SIDES = ("buy", "sell")


def _market_param(market: str) -> str:
    if not isinstance(market, str) or not market.strip():
        raise MalformedInputError(f"market must be a non-empty string, got {market!r}")
    return market.strip().lower()


class KunaClient:
    def __init__(
        self,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        nonce: Optional[NonceProvider] = None,
        logger: Optional[logging.Logger] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.credentials = Credentials(access_key=access_key or None, secret_key=secret_key or None)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.transport = transport if transport is not None else RequestsTransport(timeout_s=timeout_s)
        self._nonce = nonce if nonce is not None else now_ms
        self.log = logger or log

    @classmethod
    def from_config(cls, cfg: ClientConfig, **kwargs: Any) -> "KunaClient":
        kwargs.setdefault("timeout_s", cfg.timeout_s)
        return cls(cfg.access_key, cfg.secret_key, cfg.base_url, **kwargs)

    # --- plumbing -------------------------------------------------------------

    async def _fetch(self, verb: str, path_with_query: str) -> Any:
        url = f"{self.base_url}{path_with_query}"
        if verb == "POST":
            resp = await self.transport.post(url)
        else:
            resp = await self.transport.get(url)

        path = path_with_query.split("?", 1)[0]
        if not resp.ok:
            raise TransportError(
                f"{verb} {path} returned HTTP {resp.status}",
                status=resp.status,
                body=resp.body,
                url=url,
            )
        try:
            data = json.loads(resp.body)
        except ValueError as exc:
            raise MalformedResponseError(f"{verb} {path} returned invalid JSON: {exc}", body=resp.body) from exc
        self.log.debug("%s %s -> %s", verb, path, data)
        return data

    async def _signed(self, endpoint: SignedEndpoint, **values: Any) -> Any:
        req = build_signed_request(endpoint, values, self.credentials, self.base_url, self._nonce)
        self.log.debug("%s: %s %s tonce=%s", endpoint.name, req.verb, req.path, req.tonce)
        return await self._fetch(req.verb, req.path_with_query)

    def _map(self, what: str, fn: Callable[..., Any], *args: Any) -> Any:
        issues: List[MappingIssue] = []
        result = fn(*args, issues)
        if issues:
            self.log.warning("%s: %d field(s) could not be mapped: %s", what, len(issues), issues[:5])
        return result

    # --- public market data ---------------------------------------------------

    async def get_timestamp(self) -> int:
        data = await self._fetch("GET", "/timestamp")
        return to_int(data)

    async def get_ticker(self, market: str) -> Ticker:
        market = _market_param(market)
        data = await self._fetch("GET", f"/tickers/{quote(market, safe='')}")
        inner = data.get("ticker") if isinstance(data, dict) else None
        return self._map(f"get_ticker({market})", map_ticker, market, inner)

    async def get_tickers(self) -> List[Ticker]:
        data = await self._fetch("GET", "/tickers")
        return self._map("get_tickers", map_tickers, data)

    async def get_order_book(self, market: str) -> OrderBook:
        market = _market_param(market)
        data = await self._fetch("GET", f"/depth?market={quote(market, safe='')}")
        return self._map(f"get_order_book({market})", map_order_book, data)

    async def get_trades(self, market: str) -> List[Trade]:
        market = _market_param(market)
        data = await self._fetch("GET", f"/trades?market={quote(market, safe='')}")
        return self._map(f"get_trades({market})", map_trades, data)

    # --- account (signed) -----------------------------------------------------

    async def get_user_info(self) -> UserInfo:
        data = await self._signed(auth_query.USER_INFO)
        return self._map("get_user_info", map_user_info, data)

    async def get_user_trades(self, market: str) -> List[Trade]:
        data = await self._signed(auth_query.USER_TRADES, market=_market_param(market))
        return self._map(f"get_user_trades({market})", map_trades, data)

    async def get_user_orders(self, market: str) -> List[Order]:
        data = await self._signed(auth_query.USER_ORDERS, market=_market_param(market))
        return self._map(f"get_user_orders({market})", map_orders, data)

    async def new_order(self, side: str, volume: float, market: str, price: float) -> Order:
        side_norm = (side or "").strip().lower()
        if side_norm not in ORDER_SIDES:
            raise MalformedInputError(f"side must be one of {ORDER_SIDES}, got {side!r}")
        data = await self._signed(
            auth_query.NEW_ORDER,
            market=_market_param(market),
            price=price,
            side=side_norm,
            volume=volume,
        )
        self.log.info("new_order %s %s %s @ %s -> %s", side_norm, volume, market, price, data)
        return self._map("new_order", map_order, data)

    async def cancel_order(self, order_id: int) -> Order:
        if isinstance(order_id, bool) or not isinstance(order_id, int):
            raise MalformedInputError(f"order_id must be an int, got {order_id!r}")
        data = await self._signed(auth_query.CANCEL_ORDER, id=order_id)
        self.log.info("cancel_order %s -> %s", order_id, data)
        return self._map("cancel_order", map_order, data)
