"""
Shared enums, base model and field parsers for exchange payloads.

Responses are parsed leniently (unknown fields ignored) because the exchange
adds fields over time. Request payloads drop unset fields and serialize
decimals as strings.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


class BpxModel(BaseModel):
    """Base for exchange responses and websocket payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BpxPayload(BaseModel):
    """Base for request bodies and query parameter sets."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict with wire names; unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_timestamp_ms(value: Any) -> int:
    """
    Normalize a timestamp to epoch milliseconds.

    Accepts:
    - int or float in seconds, milliseconds, microseconds or nanoseconds;
      the unit is inferred from the magnitude
    - numeric string ("1694687965941"), same rules as int
    - ISO-8601 string ("2024-01-02T03:04:05.678", naive values are UTC),
      converted to epoch milliseconds
    - datetime, converted to epoch milliseconds

    Raises:
        ValueError: If the value cannot be interpreted.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse timestamp from bool: {value}")
    if isinstance(value, (int, float)):
        return _epoch_to_ms(value)
    if isinstance(value, datetime):
        return _datetime_to_ms(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return _epoch_to_ms(int(text))
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Cannot parse timestamp from {value!r}") from e
        return _datetime_to_ms(parsed)
    raise ValueError(f"Cannot parse timestamp from {type(value).__name__}")


# Below 1e11 an epoch value is seconds (ms would be before 1973); from 1e14
# it is microseconds and from 1e17 nanoseconds.
_SECONDS_BELOW = 10**11
_MICROS_FROM = 10**14
_NANOS_FROM = 10**17


def _epoch_to_ms(value: int | float) -> int:
    magnitude = abs(value)
    if magnitude >= _NANOS_FROM:
        return int(value // 1_000_000)
    if magnitude >= _MICROS_FROM:
        return int(value // 1_000)
    if magnitude < _SECONDS_BELOW:
        return round(value * 1_000)
    return int(value)


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def parse_int(value: Any) -> int:
    """Accept an integer or its string encoding (large ids are sent as strings)."""
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse integer from bool: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"Cannot parse integer from {type(value).__name__}")


TimestampMs = Annotated[int, BeforeValidator(parse_timestamp_ms)]
IntFromStr = Annotated[int, BeforeValidator(parse_int)]
PriceLevel = tuple[Decimal, Decimal]


class Side(str, Enum):
    BID = "Bid"
    ASK = "Ask"


class OrderType(str, Enum):
    LIMIT = "Limit"
    MARKET = "Market"

    @classmethod
    def _missing_(cls, value: object) -> OrderType | None:
        # Websocket events use LIMIT / MARKET
        if isinstance(value, str):
            for member in cls:
                if member.value.upper() == value.upper():
                    return member
        return None


class TimeInForce(str, Enum):
    GTC = "GTC"
    IOC = "IOC"
    FOK = "FOK"


class SelfTradePrevention(str, Enum):
    REJECT_TAKER = "RejectTaker"
    REJECT_MAKER = "RejectMaker"
    REJECT_BOTH = "RejectBoth"
    ALLOW = "Allow"


class OrderStatus(str, Enum):
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    FILLED = "Filled"
    NEW = "New"
    PARTIALLY_FILLED = "PartiallyFilled"
    TRIGGERED = "Triggered"
    TRIGGER_PENDING = "TriggerPending"


class TriggerBy(str, Enum):
    LAST_PRICE = "LastPrice"
    MARK_PRICE = "MarkPrice"
    INDEX_PRICE = "IndexPrice"


class SystemOrderType(str, Enum):
    COLLATERAL_CONVERSION = "CollateralConversion"
    FUTURE_EXPIRY = "FutureExpiry"
    LIQUIDATE_POSITION_ON_ADL = "LiquidatePositionOnAdl"
    LIQUIDATE_POSITION_ON_BOOK = "LiquidatePositionOnBook"
    LIQUIDATE_POSITION_ON_BACKSTOP = "LiquidatePositionOnBackstop"
    ORDER_BOOK_CLOSED = "OrderBookClosed"


class MarketType(str, Enum):
    SPOT = "SPOT"
    PERP = "PERP"
    IPERP = "IPERP"
    DATED = "DATED"
    PREDICTION = "PREDICTION"
    RFQ = "RFQ"


class SortDirection(str, Enum):
    ASC = "Asc"
    DESC = "Desc"


class Blockchain(str, Enum):
    """Deposit/withdrawal networks. Values the client does not know map to UNKNOWN."""

    SOLANA = "Solana"
    ETHEREUM = "Ethereum"
    POLYGON = "Polygon"
    BITCOIN = "Bitcoin"
    INTERNAL = "Internal"
    EQUALS_MONEY = "EqualsMoney"
    CARDANO = "Cardano"
    HYPERLIQUID = "Hyperliquid"
    STORY = "Story"
    BSC = "Bsc"
    DOGECOIN = "Dogecoin"
    SUI = "Sui"
    XRP = "XRP"
    LITECOIN = "Litecoin"
    BERACHAIN = "Berachain"
    HYPER_EVM = "HyperEVM"
    PLASMA = "Plasma"
    ARBITRUM = "Arbitrum"
    BASE = "Base"
    OPTIMISM = "Optimism"
    APTOS = "Aptos"
    SEI = "Sei"
    TRON = "Tron"
    ZERO_G = "0G"
    ECLIPSE = "Eclipse"
    FOGO = "Fogo"
    MONAD = "Monad"
    STABLE = "Stable"
    ZCASH = "Zcash"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> Blockchain:
        return cls.UNKNOWN
