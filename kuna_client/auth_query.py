"""Signed query construction.

Each authenticated endpoint declares the exact order of its query
parameters. The server recomputes the signature over the query as received,
so the order used for signing must be the order transmitted; both come from
the same ``SignedEndpoint.params`` tuple here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Tuple
from urllib.parse import quote

from kuna_client.errors import ConfigurationError, MalformedInputError
from kuna_client.nonce import NonceProvider
from kuna_client.signer import SUPPORTED_VERBS, sign
from kuna_client.types import Credentials


ACCESS_KEY = "access_key"
TONCE = "tonce"
SIGNATURE = "signature"


@dataclass(frozen=True)
class SignedEndpoint:
    name: str
    verb: str
    path: str
    params: Tuple[str, ...]

    def __post_init__(self) -> None:
        if self.verb not in SUPPORTED_VERBS:
            raise ValueError(f"{self.name}: unsupported verb {self.verb!r}")
        if ACCESS_KEY not in self.params or TONCE not in self.params:
            raise ValueError(f"{self.name}: params must include {ACCESS_KEY} and {TONCE}")
        if SIGNATURE in self.params:
            raise ValueError(f"{self.name}: {SIGNATURE} cannot be part of the signed params")
        if len(set(self.params)) != len(self.params):
            raise ValueError(f"{self.name}: duplicate params {self.params}")

    @property
    def caller_params(self) -> Tuple[str, ...]:
        """Params the caller must supply (everything but access_key/tonce)."""
        return tuple(p for p in self.params if p not in (ACCESS_KEY, TONCE))


USER_INFO = SignedEndpoint("user_info", "GET", "/members/me", ("access_key", "tonce"))
USER_TRADES = SignedEndpoint("user_trades", "GET", "/trades/my", ("access_key", "market", "tonce"))
USER_ORDERS = SignedEndpoint("user_orders", "GET", "/orders", ("access_key", "market", "tonce"))
NEW_ORDER = SignedEndpoint(
    "new_order",
    "POST",
    "/orders",
    ("access_key", "market", "price", "side", "tonce", "volume"),
)
CANCEL_ORDER = SignedEndpoint("cancel_order", "POST", "/order/delete", ("access_key", "id", "tonce"))

SIGNED_ENDPOINTS = (USER_INFO, USER_TRADES, USER_ORDERS, NEW_ORDER, CANCEL_ORDER)


@dataclass(frozen=True)
class SignedRequest:
    verb: str
    path: str
    query: str
    signature: str
    tonce: int

    @property
    def path_with_query(self) -> str:
        return f"{self.path}?{self.query}&{SIGNATURE}={self.signature}"


def format_param(value: Any) -> str:
    if isinstance(value, bool):
        raise MalformedInputError(f"Boolean query values are not supported: {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedInputError(f"Non-finite query value: {value!r}")
        return format(Decimal(repr(value)).normalize(), "f")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MalformedInputError(f"Non-finite query value: {value!r}")
        return format(value.normalize(), "f")
    if isinstance(value, str):
        if not value:
            raise MalformedInputError("Empty query value")
        return quote(value, safe="")
    raise MalformedInputError(f"Unsupported query value type: {type(value).__name__}")


def build_query(endpoint: SignedEndpoint, values: Mapping[str, Any], access_key: str, tonce: int) -> str:
    expected = set(endpoint.caller_params)
    missing = sorted(expected - set(values))
    unexpected = sorted(set(values) - expected)
    if missing or unexpected:
        raise MalformedInputError(
            f"{endpoint.name}: missing params {missing}, unexpected params {unexpected}"
        )
    merged = dict(values)
    merged[ACCESS_KEY] = access_key
    merged[TONCE] = int(tonce)
    return "&".join(f"{name}={format_param(merged[name])}" for name in endpoint.params)


def build_signed_request(
    endpoint: SignedEndpoint,
    values: Mapping[str, Any],
    credentials: Credentials,
    base_url: str,
    nonce: NonceProvider,
) -> SignedRequest:
    if not credentials.can_sign:
        raise ConfigurationError(
            f"{endpoint.name} requires both an access key and a secret key"
        )
    tonce = int(nonce())
    query = build_query(endpoint, values, credentials.access_key, tonce)
    signature = sign(endpoint.verb, f"{base_url.rstrip('/')}{endpoint.path}?{query}", credentials.secret_key)
    return SignedRequest(
        verb=endpoint.verb,
        path=endpoint.path,
        query=query,
        signature=signature,
        tonce=tonce,
    )
