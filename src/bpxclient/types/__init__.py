"""Typed request payloads, REST responses and websocket payloads."""

from bpxclient.types.account import (
    AccountMaxBorrow,
    AccountMaxOrder,
    AccountMaxWithdrawal,
    AccountSettings,
    ConvertDustPayload,
    MaxOrderQuery,
    UpdateAccountPayload,
)
from bpxclient.types.capital import (
    Balance,
    Collateral,
    CollateralAsset,
    Deposit,
    DepositAddress,
    DepositStatus,
    RequestWithdrawalPayload,
    Withdrawal,
    WithdrawalStatus,
)
from bpxclient.types.common import (
    Blockchain,
    BpxModel,
    BpxPayload,
    IntFromStr,
    MarketType,
    OrderStatus,
    OrderType,
    SelfTradePrevention,
    Side,
    SortDirection,
    SystemOrderType,
    TimeInForce,
    TimestampMs,
    TriggerBy,
    parse_timestamp_ms,
)
from bpxclient.types.history import Fill, FillsHistoryParams, FillType, Trade
from bpxclient.types.markets import (
    Asset,
    FundingRate,
    Kline,
    KlineUpdate,
    LeverageFilter,
    Market,
    MarketFilters,
    MarkPrice,
    MarkPriceUpdate,
    OrderBookDepth,
    OrderBookDepthLimit,
    OrderBookDepthUpdate,
    PriceFilter,
    QuantityFilter,
    Ticker,
    TickerUpdate,
    Token,
)
from bpxclient.types.order import (
    CancelOpenOrdersPayload,
    CancelOrderPayload,
    ExecuteOrderPayload,
    LimitOrder,
    MarketOrder,
    Order,
    OrderAdapter,
    OrderUpdate,
    OrderUpdateType,
    TriggerQuantity,
    TriggerQuantityKind,
)
from bpxclient.types.positions import (
    BorrowLendPosition,
    FuturePosition,
    MarginFunction,
    VaultRedeem,
    VaultRedeemStatus,
)
from bpxclient.types.rfq import (
    Quote,
    QuoteAcceptPayload,
    QuotePayload,
    RequestForQuote,
    RequestForQuoteCancelPayload,
    RequestForQuotePayload,
    RequestForQuoteRefreshPayload,
    RequestForQuoteUpdate,
    RequestForQuoteUpdateAdapter,
    RfqExecutionMode,
)
from bpxclient.types.user import (
    RequestTwoFactorPayload,
    RequestTwoFactorResponse,
    User,
    UserPermissions,
)

__all__ = [
    "AccountMaxBorrow",
    "AccountMaxOrder",
    "AccountMaxWithdrawal",
    "AccountSettings",
    "Asset",
    "Balance",
    "Blockchain",
    "BorrowLendPosition",
    "BpxModel",
    "BpxPayload",
    "CancelOpenOrdersPayload",
    "CancelOrderPayload",
    "Collateral",
    "CollateralAsset",
    "ConvertDustPayload",
    "Deposit",
    "DepositAddress",
    "DepositStatus",
    "ExecuteOrderPayload",
    "Fill",
    "FillType",
    "FillsHistoryParams",
    "FundingRate",
    "FuturePosition",
    "IntFromStr",
    "Kline",
    "KlineUpdate",
    "LeverageFilter",
    "LimitOrder",
    "MarginFunction",
    "MarkPrice",
    "MarkPriceUpdate",
    "Market",
    "MarketFilters",
    "MarketOrder",
    "MarketType",
    "MaxOrderQuery",
    "Order",
    "OrderAdapter",
    "OrderBookDepth",
    "OrderBookDepthLimit",
    "OrderBookDepthUpdate",
    "OrderStatus",
    "OrderType",
    "OrderUpdate",
    "OrderUpdateType",
    "PriceFilter",
    "QuantityFilter",
    "Quote",
    "QuoteAcceptPayload",
    "QuotePayload",
    "RequestForQuote",
    "RequestForQuoteCancelPayload",
    "RequestForQuotePayload",
    "RequestForQuoteRefreshPayload",
    "RequestForQuoteUpdate",
    "RequestForQuoteUpdateAdapter",
    "RequestTwoFactorPayload",
    "RequestTwoFactorResponse",
    "RequestWithdrawalPayload",
    "RfqExecutionMode",
    "SelfTradePrevention",
    "Side",
    "SortDirection",
    "SystemOrderType",
    "Ticker",
    "TickerUpdate",
    "TimeInForce",
    "TimestampMs",
    "Token",
    "Trade",
    "TriggerBy",
    "TriggerQuantity",
    "TriggerQuantityKind",
    "UpdateAccountPayload",
    "User",
    "UserPermissions",
    "VaultRedeem",
    "VaultRedeemStatus",
    "Withdrawal",
    "WithdrawalStatus",
    "parse_timestamp_ms",
]
