"""Balances, deposits, withdrawals and collateral."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from bpxclient.types.common import Blockchain, BpxModel, BpxPayload, TimestampMs


class Balance(BpxModel):
    available: Decimal
    locked: Decimal
    staked: Decimal


class DepositStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class Deposit(BpxModel):
    id: int
    to_address: str | None = None
    from_address: str | None = None
    confirmation_block_number: int | None = None
    identifier: str | None = None
    source: str
    status: DepositStatus
    subaccount_id: int | None = None
    symbol: str
    quantity: Decimal
    created_at: TimestampMs


class DepositAddress(BpxModel):
    address: str


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    VERIFYING = "verifying"
    VOID = "void"


class Withdrawal(BpxModel):
    id: int
    blockchain: Blockchain
    client_id: str | None = None
    identifier: str | None = None
    quantity: Decimal
    fee: Decimal
    symbol: str
    status: WithdrawalStatus
    subaccount_id: int | None = None
    to_address: str
    transaction_hash: str | None = None
    created_at: TimestampMs


class RequestWithdrawalPayload(BpxPayload):
    address: str
    blockchain: Blockchain
    quantity: Decimal
    symbol: str
    client_id: str | None = None
    two_factor_token: str | None = None
    auto_borrow: bool | None = None
    auto_lend_redeem: bool | None = None


class CollateralAsset(BpxModel):
    symbol: str
    asset_mark_price: Decimal
    total_quantity: Decimal
    balance_notional: Decimal
    collateral_weight: Decimal
    collateral_value: Decimal
    open_order_quantity: Decimal
    lend_quantity: Decimal
    available_quantity: Decimal


class Collateral(BpxModel):
    """Margin summary for the (sub)account."""

    asset_mark_price: Decimal | None = None
    borrow_liability: Decimal
    collateral: list[CollateralAsset] = Field(default_factory=list)
    imf: Decimal
    unsettled_equity: Decimal | None = None
    liabilities_value: Decimal | None = None
    margin_fraction: Decimal | None = None
    mmf: Decimal
    net_equity: Decimal
    net_equity_available: Decimal
    net_equity_locked: Decimal
    net_exposure_futures: Decimal | None = None
    pnl_unrealized: Decimal
