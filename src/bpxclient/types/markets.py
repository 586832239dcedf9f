"""Market data: assets, markets, tickers, depth, klines, funding and mark prices."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from bpxclient.types.common import (
    Blockchain,
    BpxModel,
    IntFromStr,
    PriceLevel,
    TimestampMs,
)


class Token(BpxModel):
    blockchain: Blockchain
    contract_address: str | None = None
    deposit_enabled: bool
    display_name: str | None = None
    minimum_deposit: Decimal
    withdraw_enabled: bool
    minimum_withdrawal: Decimal
    maximum_withdrawal: Decimal | None = None
    withdrawal_fee: Decimal


class Asset(BpxModel):
    """An asset and its representations across blockchains."""

    symbol: str
    display_name: str | None = None
    coingecko_id: str | None = None
    tokens: list[Token] = Field(default_factory=list)


class PriceBandMarkPrice(BpxModel):
    max_multiplier: Decimal
    min_multiplier: Decimal


class PriceBandPremium(BpxModel):
    tolerance_pct: Decimal
    index_price: Decimal | None = None
    max_premium_pct: Decimal | None = None
    min_premium_pct: Decimal | None = None


class PriceFilter(BpxModel):
    min_price: Decimal
    max_price: Decimal | None = None
    tick_size: Decimal
    max_multiplier: Decimal | None = None
    min_multiplier: Decimal | None = None
    max_impact_multiplier: Decimal | None = None
    min_impact_multiplier: Decimal | None = None
    mean_mark_price_band: PriceBandMarkPrice | None = None
    mean_premium_band: PriceBandPremium | None = None
    borrow_entry_fee_max_multiplier: Decimal | None = None
    borrow_entry_fee_min_multiplier: Decimal | None = None


class QuantityFilter(BpxModel):
    min_quantity: Decimal
    max_quantity: Decimal | None = None
    step_size: Decimal


class LeverageFilter(BpxModel):
    min_leverage: Decimal
    max_leverage: Decimal
    step_size: Decimal


class MarketFilters(BpxModel):
    price: PriceFilter
    quantity: QuantityFilter
    leverage: LeverageFilter | None = None


def _decimal_places(value: Decimal) -> int:
    exponent = value.as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


class Market(BpxModel):
    """
    A market where base and quote assets are exchanged, e.g. BTC_USDC.

    market_type is kept as a string since new market types appear over time.
    """

    symbol: str
    base_symbol: str
    quote_symbol: str
    market_type: str
    filters: MarketFilters

    @property
    def price_decimal_places(self) -> int:
        """Decimal places accepted on prices (from the tick size)."""
        return _decimal_places(self.filters.price.tick_size)

    @property
    def quantity_decimal_places(self) -> int:
        """Decimal places accepted on quantities (from the step size)."""
        return _decimal_places(self.filters.quantity.step_size)


class Ticker(BpxModel):
    symbol: str
    first_price: Decimal
    last_price: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    high: Decimal
    low: Decimal
    volume: Decimal
    quote_volume: Decimal | None = None
    trades: IntFromStr


class TickerUpdate(BpxModel):
    """Best bid/ask update from the ``bookTicker.<symbol>`` stream."""

    event_type: str = Field(alias="e")
    event_time: int = Field(alias="E")
    symbol: str = Field(alias="s")
    ask_price: Decimal = Field(alias="a")
    ask_quantity: Decimal = Field(alias="A")
    bid_price: Decimal = Field(alias="b")
    bid_quantity: Decimal = Field(alias="B")
    update_id: IntFromStr = Field(alias="u")
    timestamp: int = Field(alias="T")


class OrderBookDepthLimit(str, Enum):
    FIVE = "5"
    TEN = "10"
    TWENTY = "20"
    FIFTY = "50"
    ONE_HUNDRED = "100"
    FIVE_HUNDRED = "500"
    ONE_THOUSAND = "1000"

    @classmethod
    def from_int(cls, value: int) -> OrderBookDepthLimit:
        """Map an integer depth to a supported limit."""
        try:
            return cls(str(value))
        except ValueError:
            raise ValueError(f"Invalid OrderBookDepthLimit value: {value}") from None


class OrderBookDepth(BpxModel):
    """Order book snapshot. lastUpdateId arrives as an integer or a string."""

    asks: list[PriceLevel]
    bids: list[PriceLevel]
    last_update_id: IntFromStr
    timestamp: int


class OrderBookDepthUpdate(BpxModel):
    event_type: str = Field(alias="e")
    event_time: int = Field(alias="E")
    symbol: str = Field(alias="s")
    timestamp: int = Field(alias="T")
    first_update_id: int = Field(alias="U")
    last_update_id: int = Field(alias="u")
    asks: list[PriceLevel] = Field(alias="a")
    bids: list[PriceLevel] = Field(alias="b")


class Kline(BpxModel):
    start: TimestampMs
    end: TimestampMs | None = None
    open: Decimal | None = None
    high: Decimal | None = None
    low: Decimal | None = None
    close: Decimal | None = None
    volume: Decimal
    quote_volume: Decimal | None = None
    trades: IntFromStr


class KlineUpdate(BpxModel):
    event_type: str = Field(alias="e")
    event_time: int = Field(alias="E")
    symbol: str = Field(alias="s")
    start_time: TimestampMs = Field(alias="t")
    end_time: TimestampMs = Field(alias="T")
    open_price: Decimal = Field(alias="o")
    close_price: Decimal = Field(alias="c")
    high_price: Decimal = Field(alias="h")
    low_price: Decimal = Field(alias="l")
    volume: Decimal = Field(alias="v")
    trades: int = Field(alias="n")
    is_closed: bool = Field(alias="X")


class FundingRate(BpxModel):
    symbol: str
    interval_end_timestamp: TimestampMs
    funding_rate: Decimal


class MarkPrice(BpxModel):
    symbol: str
    funding_rate: Decimal
    index_price: Decimal
    mark_price: Decimal
    next_funding_timestamp: TimestampMs


class MarkPriceUpdate(BpxModel):
    event_type: str = Field(alias="e")
    event_time: int = Field(alias="E")
    symbol: str = Field(alias="s")
    mark_price: Decimal = Field(alias="p")
    funding_rate: Decimal = Field(alias="f")
    index_price: Decimal = Field(alias="i")
    funding_timestamp: int = Field(alias="n")
    engine_timestamp: int = Field(alias="T")
