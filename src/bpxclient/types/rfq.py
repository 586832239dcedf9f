"""
Request-for-quote payloads, responses and stream updates.

RFQ updates on ``account.rfqUpdate`` share a stream and are told apart by the
``e`` (event type) key.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from bpxclient.types.common import (
    BpxModel,
    BpxPayload,
    OrderStatus,
    Side,
    SystemOrderType,
)


class RfqExecutionMode(str, Enum):
    AWAIT_ACCEPT = "AwaitAccept"
    IMMEDIATE = "Immediate"


class RequestForQuotePayload(BpxPayload):
    symbol: str
    side: Side
    client_id: int | None = None
    quantity: Decimal | None = None
    quote_quantity: Decimal | None = None
    price: Decimal | None = None
    execution_mode: RfqExecutionMode | None = None


class RequestForQuoteCancelPayload(BpxPayload):
    rfq_id: str | None = None
    client_id: int | None = None


class RequestForQuoteRefreshPayload(BpxPayload):
    rfq_id: str


class QuoteAcceptPayload(BpxPayload):
    quote_id: str
    rfq_id: str | None = None
    client_id: int | None = None


class QuotePayload(BpxPayload):
    rfq_id: str
    bid_price: Decimal
    ask_price: Decimal
    client_id: int | None = None
    auto_lend: bool | None = None
    auto_lend_redeem: bool | None = None
    auto_borrow: bool | None = None
    auto_borrow_repay: bool | None = None


class Quote(BpxModel):
    rfq_id: str
    quote_id: str
    client_id: int | None = None
    bid_price: Decimal
    ask_price: Decimal
    status: OrderStatus
    created_at: int


class RequestForQuote(BpxModel):
    rfq_id: str
    client_id: int | None = None
    symbol: str
    side: Side
    price: Decimal | None = None
    quantity: Decimal | None = None
    quote_quantity: Decimal | None = None
    submission_time: int
    expiry_time: int
    status: OrderStatus
    execution_mode: RfqExecutionMode = RfqExecutionMode.AWAIT_ACCEPT
    created_at: int
    system_order_type: SystemOrderType | None = None


class _RfqEvent(BpxModel):
    event_time: int = Field(alias="E")
    rfq_id: int = Field(alias="R")
    client_id: int | None = Field(default=None, alias="C")
    symbol: str = Field(alias="s")
    order_status: OrderStatus = Field(alias="X")
    timestamp: int = Field(alias="T")


class _RfqLifecycleEvent(_RfqEvent):
    quantity: Decimal | None = Field(default=None, alias="q")
    quote_quantity: Decimal | None = Field(default=None, alias="Q")
    submission_time: int = Field(alias="w")
    expiry_time: int = Field(alias="W")
    system_order_type: SystemOrderType | None = Field(default=None, alias="o")


class RfqActive(_RfqLifecycleEvent):
    event_type: Literal["rfqActive"] = Field(alias="e")
    side: Side | None = Field(default=None, alias="S")


class RfqRefreshed(_RfqLifecycleEvent):
    event_type: Literal["rfqRefreshed"] = Field(alias="e")
    side: Side = Field(alias="S")


class RfqAccepted(_RfqLifecycleEvent):
    event_type: Literal["rfqAccepted"] = Field(alias="e")
    side: Side = Field(alias="S")


class RfqCancelled(_RfqLifecycleEvent):
    event_type: Literal["rfqCancelled"] = Field(alias="e")
    side: Side = Field(alias="S")


class QuoteAccepted(_RfqEvent):
    event_type: Literal["quoteAccepted"] = Field(alias="e")
    quote_id: int = Field(alias="u")
    price: Decimal | None = Field(default=None, alias="p")


class QuoteCancelled(_RfqEvent):
    event_type: Literal["quoteCancelled"] = Field(alias="e")
    quote_id: int = Field(alias="u")
    price: Decimal | None = Field(default=None, alias="p")


class RfqCandidate(_RfqEvent):
    event_type: Literal["rfqCandidate"] = Field(alias="e")
    quote_id: int = Field(alias="u")
    side: Side | None = Field(default=None, alias="S")
    quantity: Decimal | None = Field(default=None, alias="q")
    quote_quantity: Decimal | None = Field(default=None, alias="Q")
    price: Decimal = Field(alias="p")


class RfqFilled(_RfqEvent):
    event_type: Literal["rfqFilled"] = Field(alias="e")
    quote_id: int = Field(alias="u")
    side: Side = Field(alias="S")
    quantity: Decimal | None = Field(default=None, alias="q")
    quote_quantity: Decimal | None = Field(default=None, alias="Q")
    price: Decimal | None = Field(default=None, alias="p")
    system_order_type: SystemOrderType | None = Field(default=None, alias="o")


RequestForQuoteUpdate = Annotated[
    RfqActive
    | RfqRefreshed
    | RfqAccepted
    | RfqCancelled
    | QuoteAccepted
    | QuoteCancelled
    | RfqCandidate
    | RfqFilled,
    Field(discriminator="event_type"),
]
RequestForQuoteUpdateAdapter: TypeAdapter[RequestForQuoteUpdate] = TypeAdapter(
    RequestForQuoteUpdate
)
