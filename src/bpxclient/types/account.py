"""Account settings and limits."""

from __future__ import annotations

from decimal import Decimal

from bpxclient.types.common import BpxModel, BpxPayload, Side


class AccountSettings(BpxModel):
    auto_borrow_settlements: bool
    auto_lend: bool
    auto_realize_pnl: bool
    auto_repay_borrows: bool
    borrow_limit: Decimal
    futures_maker_fee: Decimal
    futures_taker_fee: Decimal
    leverage_limit: Decimal
    limit_orders: int
    liquidating: bool
    position_limit: Decimal
    spot_maker_fee: Decimal
    spot_taker_fee: Decimal
    trigger_orders: int


class AccountMaxBorrow(BpxModel):
    max_borrow_quantity: Decimal
    symbol: str


class AccountMaxWithdrawal(BpxModel):
    auto_borrow: bool | None = None
    auto_lend_redeem: bool | None = None
    max_withdrawal_quantity: Decimal
    symbol: str


class AccountMaxOrder(BpxModel):
    max_order_quantity: Decimal
    symbol: str
    side: Side
    price: Decimal | None = None
    reduce_only: bool | None = None
    auto_borrow: bool | None = None
    auto_borrow_repay: bool | None = None
    auto_lend_redeem: bool | None = None


class MaxOrderQuery(BpxPayload):
    """Query parameters for the maximum order quantity endpoint."""

    symbol: str
    side: Side
    price: Decimal | None = None
    reduce_only: bool | None = None
    auto_borrow: bool | None = None
    auto_borrow_repay: bool | None = None
    auto_lend_redeem: bool | None = None


class UpdateAccountPayload(BpxPayload):
    auto_borrow_settlements: bool | None = None
    auto_lend: bool | None = None
    auto_repay_borrows: bool | None = None
    leverage_limit: Decimal | None = None


class ConvertDustPayload(BpxPayload):
    """Omit symbol to convert every dust balance."""

    symbol: str | None = None
