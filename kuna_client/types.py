from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Credentials:
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    @property
    def can_sign(self) -> bool:
        return bool(self.access_key) and bool(self.secret_key)

    def __repr__(self) -> str:
        # keep the secret out of logs and tracebacks
        masked = "***" if self.secret_key else None
        return f"Credentials(access_key={self.access_key!r}, secret_key={masked!r})"


@dataclass(frozen=True)
class Ticker:
    """Ticker for one market.

    The known fields are passed through as the exchange sent them (usually
    strings). Anything else lands in ``extra``.
    """

    market: str
    buy: Any = None
    sell: Any = None
    low: Any = None
    high: Any = None
    last: Any = None
    vol: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out.update(
            market=self.market,
            buy=self.buy,
            sell=self.sell,
            low=self.low,
            high=self.high,
            last=self.last,
            vol=self.vol,
        )
        return out


@dataclass(frozen=True)
class OrderBook:
    asks: List[Any]
    bids: List[Any]
    raw: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class Trade:
    id: int
    price: float
    volume: float
    funds: float
    market: str
    created_at: str
    side: str


@dataclass(frozen=True)
class Order:
    id: int
    side: str
    ord_type: str
    price: float
    avg_price: float
    state: str
    market: str
    created_at: str
    volume: float
    remaining_volume: float
    executed_volume: float
    trades_count: int


@dataclass(frozen=True)
class Account:
    currency: str
    balance: float
    locked: float


@dataclass(frozen=True)
class UserInfo:
    email: str
    activated: bool
    accounts: Tuple[Account, ...]
    raw: Optional[Mapping[str, Any]] = None

    def account(self, currency: str) -> Optional[Account]:
        key = currency.lower()
        for acc in self.accounts:
            if acc.currency.lower() == key:
                return acc
        return None


@dataclass(frozen=True)
class MappingIssue:
    record: str
    field: str
    value: Any
    reason: str
