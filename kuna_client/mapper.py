"""Map raw Kuna JSON payloads onto the domain records.

Every function here is total: bad input never raises. Numeric fields that
cannot be parsed become ``nan`` (floats) or ``0`` (ints). Pass a list as
``issues`` to collect a ``MappingIssue`` for each field that had to fall
back to a sentinel.
"""

from __future__ import annotations

import math
from typing import Any, List, Mapping, Optional

from kuna_client.types import Account, MappingIssue, Order, OrderBook, Ticker, Trade, UserInfo


Issues = Optional[List[MappingIssue]]

_TICKER_FIELDS = ("buy", "sell", "low", "high", "last", "vol")


def _note(issues: Issues, record: str, field: str, value: Any, reason: str) -> None:
    if issues is not None:
        issues.append(MappingIssue(record=record, field=field, value=value, reason=reason))


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def to_float(value: Any, *, record: str = "", field: str = "", issues: Issues = None) -> float:
    if value is None:
        _note(issues, record, field, value, "missing")
        return math.nan
    parsed = _parse_number(value)
    if parsed is None:
        _note(issues, record, field, value, "not a number")
        return math.nan
    return parsed


def to_int(value: Any, *, record: str = "", field: str = "", issues: Issues = None) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    if value is None:
        _note(issues, record, field, value, "missing")
        return 0
    parsed = _parse_number(value)
    if parsed is None or not math.isfinite(parsed):
        _note(issues, record, field, value, "not an integer")
        return 0
    if not parsed.is_integer():
        _note(issues, record, field, value, "truncated to integer")
    return int(parsed)


def to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no", "")


def to_bool(value: Any, *, record: str = "", field: str = "", issues: Issues = None) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text not in _FALSE_STRINGS:
            _note(issues, record, field, value, "not a boolean")
        return False
    if isinstance(value, (int, float)):
        return value != 0
    _note(issues, record, field, value, "not a boolean")
    return False


def _as_mapping(raw: Any, record: str, issues: Issues) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    _note(issues, record, "", raw, "expected an object")
    return {}


def map_ticker(market: str, raw: Any, issues: Issues = None) -> Ticker:
    data = _as_mapping(raw, "ticker", issues)
    known = {name: data.get(name) for name in _TICKER_FIELDS}
    extra = {k: v for k, v in data.items() if k not in _TICKER_FIELDS and k != "market"}
    return Ticker(market=market, extra=extra, **known)


def map_tickers(raw: Any, issues: Issues = None) -> List[Ticker]:
    """Flatten ``{market: {"ticker": {...}}}`` into one Ticker per market."""
    if not isinstance(raw, Mapping):
        _note(issues, "tickers", "", raw, "expected an object keyed by market")
        return []
    tickers: List[Ticker] = []
    for market, wrapper in raw.items():
        inner = wrapper.get("ticker") if isinstance(wrapper, Mapping) else None
        if inner is None:
            _note(issues, "ticker", "ticker", wrapper, f"missing ticker wrapper for {market}")
        tickers.append(map_ticker(str(market), inner if inner is not None else {}, issues))
    return tickers


def map_order_book(raw: Any, issues: Issues = None) -> OrderBook:
    data = _as_mapping(raw, "order_book", issues)
    asks = data.get("asks")
    bids = data.get("bids")
    if not isinstance(asks, list):
        _note(issues, "order_book", "asks", asks, "expected a list")
        asks = []
    if not isinstance(bids, list):
        _note(issues, "order_book", "bids", bids, "expected a list")
        bids = []
    return OrderBook(asks=asks, bids=bids, raw=data or None)


def map_trade(raw: Any, issues: Issues = None) -> Trade:
    data = _as_mapping(raw, "trade", issues)

    def num(name: str) -> float:
        return to_float(data.get(name), record="trade", field=name, issues=issues)

    return Trade(
        id=to_int(data.get("id"), record="trade", field="id", issues=issues),
        price=num("price"),
        volume=num("volume"),
        funds=num("funds"),
        market=to_str(data.get("market")),
        created_at=to_str(data.get("created_at")),
        side=to_str(data.get("side")),
    )


def map_order(raw: Any, issues: Issues = None) -> Order:
    data = _as_mapping(raw, "order", issues)

    def num(name: str) -> float:
        return to_float(data.get(name), record="order", field=name, issues=issues)

    return Order(
        id=to_int(data.get("id"), record="order", field="id", issues=issues),
        side=to_str(data.get("side")),
        ord_type=to_str(data.get("ord_type")),
        price=num("price"),
        avg_price=num("avg_price"),
        state=to_str(data.get("state")),
        market=to_str(data.get("market")),
        created_at=to_str(data.get("created_at")),
        volume=num("volume"),
        remaining_volume=num("remaining_volume"),
        executed_volume=num("executed_volume"),
        trades_count=to_int(data.get("trades_count"), record="order", field="trades_count", issues=issues),
    )


def _map_list(raw: Any, record: str, fn, issues: Issues) -> list:
    if not isinstance(raw, list):
        _note(issues, record, "", raw, "expected a list")
        return []
    return [fn(item, issues) for item in raw]


def map_trades(raw: Any, issues: Issues = None) -> List[Trade]:
    return _map_list(raw, "trades", map_trade, issues)


def map_orders(raw: Any, issues: Issues = None) -> List[Order]:
    return _map_list(raw, "orders", map_order, issues)


def map_account(raw: Any, issues: Issues = None) -> Account:
    data = _as_mapping(raw, "account", issues)
    return Account(
        currency=to_str(data.get("currency")),
        balance=to_float(data.get("balance"), record="account", field="balance", issues=issues),
        locked=to_float(data.get("locked"), record="account", field="locked", issues=issues),
    )


def map_user_info(raw: Any, issues: Issues = None) -> UserInfo:
    data = _as_mapping(raw, "user_info", issues)
    accounts = data.get("accounts")
    if accounts is None:
        accounts = []
    return UserInfo(
        email=to_str(data.get("email")),
        activated=to_bool(data.get("activated"), record="user_info", field="activated", issues=issues),
        accounts=tuple(_map_list(accounts, "accounts", map_account, issues)),
        raw=data or None,
    )
