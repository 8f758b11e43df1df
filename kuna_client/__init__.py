from __future__ import annotations

from .client import KunaClient
from .errors import (
    ConfigurationError,
    KunaError,
    MalformedInputError,
    MalformedResponseError,
    TransportError,
)
from .settings import ClientConfig, load_config
from .signer import canonical_string, sign
from .types import Account, Credentials, MappingIssue, Order, OrderBook, Ticker, Trade, UserInfo

__all__ = [
    "Account",
    "ClientConfig",
    "ConfigurationError",
    "Credentials",
    "KunaClient",
    "KunaError",
    "MalformedInputError",
    "MalformedResponseError",
    "MappingIssue",
    "Order",
    "OrderBook",
    "Ticker",
    "Trade",
    "TransportError",
    "UserInfo",
    "canonical_string",
    "load_config",
    "sign",
]
