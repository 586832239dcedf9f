"""Fills history and public trades."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from bpxclient.types.common import (
    BpxModel,
    BpxPayload,
    IntFromStr,
    Side,
    SortDirection,
    TimestampMs,
)


class FillType(str, Enum):
    USER = "User"
    BOOK_LIQUIDATION = "BookLiquidation"
    ADL = "Adl"
    BACKSTOP = "Backstop"
    LIQUIDATION = "Liquidation"
    ALL_LIQUIDATION = "AllLiquidation"
    COLLATERAL_CONVERSION = "CollateralConversion"
    COLLATERAL_CONVERSION_AND_SPOT_LIQUIDATION = "CollateralConversionAndSpotLiquidation"


class Fill(BpxModel):
    trade_id: int | None = None
    client_id: str | None = None
    order_id: str
    symbol: str
    fee_symbol: str
    price: Decimal
    quantity: Decimal
    fee: Decimal
    side: Side
    timestamp: TimestampMs
    is_maker: bool
    system_order_type: str | None = None


class FillsHistoryParams(BpxPayload):
    """
    Filters for the fills history endpoint.

    from/to are epoch milliseconds; limit/offset paginate.
    """

    symbol: str | None = None
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None
    fill_type: FillType | None = None
    market_type: str | None = None
    order_id: str | None = None
    strategy_id: str | None = None
    limit: int | None = None
    offset: int | None = None
    sort_direction: SortDirection | None = None


class Trade(BpxModel):
    id: IntFromStr | None = None
    price: Decimal
    quantity: Decimal
    quote_quantity: Decimal
    timestamp: TimestampMs
    is_buyer_maker: bool
