"""
Order payloads, order responses and order update events.

REST order responses come in two shapes sharing the ``orderType`` discriminant:
market orders (optional quantity, optional quote quantity) and limit orders
(price, quantity, postOnly). Order is the tagged union of the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import Field, GetCoreSchemaHandler, TypeAdapter
from pydantic_core import core_schema

from bpxclient.types.common import (
    BpxModel,
    BpxPayload,
    OrderStatus,
    OrderType,
    SelfTradePrevention,
    Side,
    TimeInForce,
    TriggerBy,
)


class TriggerQuantityKind(str, Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


@dataclass(frozen=True)
class TriggerQuantity:
    """
    Quantity released when a trigger order fires.

    Either a percentage of the position ("12.5%") or an absolute amount
    ("0.01"). Always serialized as a string.
    """

    kind: TriggerQuantityKind
    value: Decimal

    @classmethod
    def percent(cls, value: Decimal | str | int) -> TriggerQuantity:
        return cls(TriggerQuantityKind.PERCENT, Decimal(str(value)))

    @classmethod
    def amount(cls, value: Decimal | str | int) -> TriggerQuantity:
        return cls(TriggerQuantityKind.AMOUNT, Decimal(str(value)))

    @classmethod
    def parse(cls, value: Any) -> TriggerQuantity:
        """Parse "12.5%", "0.01" or a number."""
        if isinstance(value, TriggerQuantity):
            return value
        if isinstance(value, bool):
            raise ValueError("trigger quantity cannot be a bool")
        if isinstance(value, (int, float, Decimal)):
            return cls.amount(str(value))
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.endswith("%"):
                    return cls.percent(text[:-1].strip())
                return cls.amount(text)
            except InvalidOperation as e:
                raise ValueError(f"invalid trigger quantity: {value!r}") from e
        raise ValueError(f'expected a string like "12.5%" or "0.01", or a number, got {value!r}')

    def __str__(self) -> str:
        if self.kind == TriggerQuantityKind.PERCENT:
            return f"{self.value}%"
        return str(self.value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.parse,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, return_schema=core_schema.str_schema()
            ),
        )


class _OrderBase(BpxModel):
    id: str
    client_id: int | None = None
    symbol: str
    side: Side
    executed_quantity: Decimal
    executed_quote_quantity: Decimal
    stop_loss_trigger_price: Decimal | None = None
    stop_loss_limit_price: Decimal | None = None
    stop_loss_trigger_by: TriggerBy | None = None
    take_profit_trigger_price: Decimal | None = None
    take_profit_limit_price: Decimal | None = None
    take_profit_trigger_by: TriggerBy | None = None
    trigger_by: TriggerBy | None = None
    trigger_price: Decimal | None = None
    trigger_quantity: TriggerQuantity | None = None
    triggered_at: int | None = None
    time_in_force: TimeInForce
    related_order_id: str | None = None
    self_trade_prevention: SelfTradePrevention
    reduce_only: bool | None = None
    status: OrderStatus
    created_at: int


class MarketOrder(_OrderBase):
    order_type: Literal["Market"]
    quantity: Decimal | None = None
    quote_quantity: Decimal | None = None


class LimitOrder(_OrderBase):
    order_type: Literal["Limit"]
    quantity: Decimal
    price: Decimal
    post_only: bool


Order = Annotated[MarketOrder | LimitOrder, Field(discriminator="order_type")]
OrderAdapter: TypeAdapter[MarketOrder | LimitOrder] = TypeAdapter(Order)


class ExecuteOrderPayload(BpxPayload):
    """Body for placing an order (single or as an element of a batch)."""

    symbol: str
    side: Side
    order_type: OrderType
    auto_lend: bool | None = None
    auto_lend_redeem: bool | None = None
    auto_borrow: bool | None = None
    auto_borrow_repay: bool | None = None
    client_id: int | None = None
    post_only: bool | None = None
    price: Decimal | None = None
    quantity: Decimal | None = None
    quote_quantity: Decimal | None = None
    self_trade_prevention: SelfTradePrevention | None = None
    time_in_force: TimeInForce | None = None
    trigger_by: TriggerBy | None = None
    trigger_price: Decimal | None = None
    trigger_quantity: TriggerQuantity | None = None
    reduce_only: bool | None = None
    stop_loss_trigger_price: Decimal | None = None
    stop_loss_limit_price: Decimal | None = None
    take_profit_trigger_price: Decimal | None = None
    take_profit_limit_price: Decimal | None = None


class CancelOrderPayload(BpxPayload):
    symbol: str
    order_id: str | None = None
    client_id: int | None = None


class CancelOpenOrdersPayload(BpxPayload):
    symbol: str


class OrderUpdateType(str, Enum):
    ORDER_ACCEPTED = "orderAccepted"
    ORDER_CANCELLED = "orderCancelled"
    ORDER_EXPIRED = "orderExpired"
    ORDER_FILL = "orderFill"
    ORDER_MODIFIED = "orderModified"
    TRIGGER_PLACED = "triggerPlaced"
    TRIGGER_FAILED = "triggerFailed"


class OrderUpdate(BpxModel):
    """
    Order update from the ``account.orderUpdate`` stream.

    Keys on the wire are single letters; event and engine times are in
    microseconds.
    """

    event_type: OrderUpdateType = Field(alias="e")
    event_time: int = Field(alias="E")
    symbol: str = Field(alias="s")
    client_order_id: int | None = Field(default=None, alias="c")
    side: Side = Field(alias="S")
    order_type: OrderType = Field(alias="o")
    time_in_force: TimeInForce = Field(alias="f")
    quantity: Decimal = Field(alias="q")
    quantity_in_quote: Decimal | None = Field(default=None, alias="Q")
    price: Decimal | None = Field(default=None, alias="p")
    trigger_price: Decimal | None = Field(default=None, alias="P")
    trigger_by: TriggerBy | None = Field(default=None, alias="B")
    take_profit_trigger_price: Decimal | None = Field(default=None, alias="a")
    stop_loss_trigger_price: Decimal | None = Field(default=None, alias="b")
    take_profit_trigger_by: TriggerBy | None = Field(default=None, alias="d")
    stop_loss_trigger_by: TriggerBy | None = Field(default=None, alias="g")
    trigger_quantity: Decimal | None = Field(default=None, alias="Y")
    order_status: OrderStatus = Field(alias="X")
    order_expiry_reason: str | None = Field(default=None, alias="R")
    order_id: str = Field(alias="i")
    trade_id: int | None = Field(default=None, alias="t")
    fill_quantity: Decimal | None = Field(default=None, alias="l")
    executed_quantity: Decimal = Field(alias="z")
    executed_quantity_in_quote: Decimal = Field(alias="Z")
    fill_price: Decimal | None = Field(default=None, alias="L")
    was_maker: bool | None = Field(default=None, alias="m")
    fee: Decimal | None = Field(default=None, alias="n")
    fee_symbol: str | None = Field(default=None, alias="N")
    self_trade_prevention: SelfTradePrevention = Field(alias="V")
    timestamp: int = Field(alias="T")
    origin_of_the_update: str = Field(alias="O")
    related_order_id: int | None = Field(default=None, alias="I")
    reduce_only: bool | None = Field(default=None, alias="r")
