"""
Static route table for the Backpack Exchange REST API and websocket streams.

Paths are joined onto the configured base URL. Instruction names for signed
routes live in bpxclient.signing.instructions.
"""

from __future__ import annotations

# Markets (public)
API_ASSETS = "/api/v1/assets"
API_MARKETS = "/api/v1/markets"
API_TICKER = "/api/v1/ticker"
API_TICKERS = "/api/v1/tickers"
API_DEPTH = "/api/v1/depth"
API_KLINES = "/api/v1/klines"
API_FUNDING = "/api/v1/fundingRates"
API_MARK_PRICES = "/api/v1/markPrices"

# Trades (public)
API_TRADES = "/api/v1/trades"
API_TRADES_HISTORY = "/api/v1/trades/history"

# Account
API_ACCOUNT = "/api/v1/account"
API_ACCOUNT_MAX_BORROW = "/api/v1/account/limits/borrow"
API_ACCOUNT_MAX_ORDER = "/api/v1/account/limits/order"
API_ACCOUNT_MAX_WITHDRAWAL = "/api/v1/account/limits/withdrawal"
API_ACCOUNT_CONVERT_DUST = "/api/v1/account/convertDust"

# Capital
API_CAPITAL = "/api/v1/capital"
API_COLLATERAL = "/api/v1/capital/collateral"
API_DEPOSITS = "/wapi/v1/capital/deposits"
API_DEPOSIT_ADDRESS = "/wapi/v1/capital/deposit/address"
API_WITHDRAWALS = "/wapi/v1/capital/withdrawals"

# Orders
API_ORDER = "/api/v1/order"
API_ORDERS = "/api/v1/orders"

# Request for quote
API_RFQ = "/api/v1/rfq"
API_RFQ_QUOTE = "/api/v1/rfq/quote"
API_RFQ_ACCEPT = "/api/v1/rfq/accept"
API_RFQ_CANCEL = "/api/v1/rfq/cancel"
API_RFQ_REFRESH = "/api/v1/rfq/refresh"

# Positions
API_FUTURES_POSITION = "/api/v1/position"
API_BORROW_LEND_POSITIONS = "/api/v1/borrowLend/positions"

# History
API_FILLS_HISTORY = "/wapi/v1/history/fills"

# User
API_USER = "/wapi/v1/user"
API_USER_2FA = "/wapi/v1/user/2fa"

# Vault
API_VAULT_PENDING_REDEEMS = "/api/v1/vault/redeems/pending"

# Websocket streams
PRIVATE_STREAM_PREFIX = "account."
ORDER_UPDATE_STREAM = "account.orderUpdate"
RFQ_UPDATE_STREAM = "account.rfqUpdate"


def ticker_stream(symbol: str) -> str:
    return f"ticker.{symbol}"


def book_ticker_stream(symbol: str) -> str:
    return f"bookTicker.{symbol}"


def depth_stream(symbol: str) -> str:
    return f"depth.{symbol}"


def kline_stream(interval: str, symbol: str) -> str:
    return f"kline.{interval}.{symbol}"


def mark_price_stream(symbol: str) -> str:
    return f"markPrice.{symbol}"


def trade_stream(symbol: str) -> str:
    return f"trade.{symbol}"


def order_update_stream(symbol: str | None = None) -> str:
    """Private order update stream, optionally narrowed to one symbol."""
    if symbol is None:
        return ORDER_UPDATE_STREAM
    return f"{ORDER_UPDATE_STREAM}.{symbol}"
