from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from typing import Any, List, Optional

from kuna_client.client import KunaClient
from kuna_client.errors import KunaError
from kuna_client.logging_config import setup_logging
from kuna_client.settings import load_config
from kuna_client.types import Ticker


log = logging.getLogger("kuna_client.cli")


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Ticker):
        return value.as_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="kuna-client", description="Query the Kuna exchange API")
    ap.add_argument("--config", default=None, help="YAML config file (keys, base_url, timeout_s, log_level)")
    ap.add_argument("--log-level", default=None, help="Override log level (default: from config, INFO)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("timestamp", help="Server time")
    sub.add_parser("tickers", help="Tickers for every market")
    sub.add_parser("me", help="Account info and balances (signed)")
    for name, help_text in (
        ("ticker", "Ticker for one market"),
        ("depth", "Order book for one market"),
        ("trades", "Recent public trades"),
        ("my-trades", "Own trade history (signed)"),
        ("orders", "Own open orders (signed)"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("market", help="Market symbol (e.g. btcuah)")
    for side in ("buy", "sell"):
        p = sub.add_parser(side, help=f"Place a {side} limit order (signed)")
        p.add_argument("market")
        p.add_argument("volume", type=float)
        p.add_argument("price", type=float)
    p = sub.add_parser("cancel", help="Cancel an order (signed)")
    p.add_argument("order_id", type=int)
    return ap


async def _dispatch(client: KunaClient, args: argparse.Namespace) -> Any:
    cmd = args.command
    if cmd == "timestamp":
        return await client.get_timestamp()
    if cmd == "tickers":
        return await client.get_tickers()
    if cmd == "me":
        return await client.get_user_info()
    if cmd == "ticker":
        return await client.get_ticker(args.market)
    if cmd == "depth":
        return await client.get_order_book(args.market)
    if cmd == "trades":
        return await client.get_trades(args.market)
    if cmd == "my-trades":
        return await client.get_user_trades(args.market)
    if cmd == "orders":
        return await client.get_user_orders(args.market)
    if cmd in ("buy", "sell"):
        return await client.new_order(cmd, args.volume, args.market, args.price)
    if cmd == "cancel":
        return await client.cancel_order(args.order_id)
    raise KunaError(f"Unknown command {cmd!r}")


def main(argv: Optional[List[str]] = None, client: Optional[KunaClient] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, KunaError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    setup_logging(args.log_level or cfg.log_level)

    if client is None:
        client = KunaClient.from_config(cfg)
    try:
        result = asyncio.run(_dispatch(client, args))
    except KunaError as exc:
        log.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(_to_jsonable(result), ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
