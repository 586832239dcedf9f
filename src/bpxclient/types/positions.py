"""Futures positions, borrow/lend positions and vault redeems."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import Field

from bpxclient.types.common import BpxModel, IntFromStr


class MarginFunction(BpxModel):
    base: Decimal
    factor: Decimal
    function_type: str = Field(alias="type")


class FuturePosition(BpxModel):
    symbol: str
    position_id: str
    break_even_price: Decimal
    entry_price: Decimal
    est_liquidation_price: Decimal
    imf: Decimal
    imf_function: MarginFunction | None = None
    mark_price: Decimal
    mmf: Decimal
    mmf_function: MarginFunction | None = None
    net_cost: Decimal
    net_quantity: Decimal
    net_exposure_quantity: Decimal
    net_exposure_notional: Decimal
    pnl_realized: Decimal
    pnl_unrealized: Decimal
    cumulative_funding_payment: Decimal
    cumulative_interest: Decimal | None = None
    subaccount_id: int | None = None
    user_id: int | None = None


class BorrowLendPosition(BpxModel):
    id: str
    symbol: str
    cumulative_interest: Decimal
    imf: Decimal
    imf_function: MarginFunction
    mark_price: Decimal
    mmf: Decimal
    mmf_function: MarginFunction
    net_exposure_notional: Decimal
    net_exposure_quantity: Decimal
    net_quantity: Decimal


class VaultRedeemStatus(str, Enum):
    REQUESTED = "Requested"
    REDEEMED = "Redeemed"
    CANCELLED = "Cancelled"


class VaultRedeem(BpxModel):
    status: VaultRedeemStatus
    id: IntFromStr | str
    vault_id: int
    vault_token_quantity: Decimal
    vault_token: str | None = None
    symbol: str | None = None
    quantity: Decimal | None = None
    nav: Decimal | None = None
    reason: str | None = None
    timestamp: int
