"""Order, cancel and response records, plus their JSON decoding."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

ORDER_CROSS_TRADE_REJECT_CODE = 0x01
ORDER_CROSS_TRADE_REJECT_REASON = "Cross trade detected"

ORDER_INVALID_FORMAT_REJECT_CODE = 0x02
ORDER_INVALID_FORMAT_REJECT_REASON = "Invalid order format"


class MissingFieldError(LookupError):
    """A required field is absent from an input document."""


class FieldTypeError(TypeError):
    """A field, or the document itself, has the wrong JSON type."""


class Side(Enum):
    BUY = "B"
    SELL = "S"
    UNKNOWN = "?"


class Market(Enum):
    XSHG = "XSHG"
    XSHE = "XSHE"
    BJSE = "BJSE"
    UNKNOWN = "?"


def to_string(value: Side | Market) -> str:
    """Return the wire code of a side or market."""
    if value in (Side.UNKNOWN, Market.UNKNOWN) or not isinstance(value, (Side, Market)):
        kind = "Side" if isinstance(value, Side) else "Market"
        raise ValueError(f"Invalid {kind} value")
    return value.value


def side_from_string(text: str) -> Side:
    """Parse a side code ("B" or "S")."""
    if text == "B":
        return Side.BUY
    if text == "S":
        return Side.SELL
    raise ValueError(f"Invalid side: {text}")


def market_from_string(text: str) -> Market:
    """Parse a market code."""
    for market in (Market.XSHG, Market.XSHE, Market.BJSE):
        if text == market.value:
            return market
    raise ValueError(f"Invalid market: {text}")


def _field(data: Any, name: str) -> Any:
    if not isinstance(data, Mapping):
        raise FieldTypeError(f"cannot use at() with {type(data).__name__}")
    try:
        return data[name]
    except KeyError:
        raise MissingFieldError(f"key '{name}' not found") from None


def _string(data: Any, name: str) -> str:
    value = _field(data, name)
    if not isinstance(value, str):
        raise FieldTypeError(f"field '{name}' must be a string")
    return value


def _number(data: Any, name: str) -> float:
    value = _field(data, name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldTypeError(f"field '{name}' must be a number")
    return float(value)


def _unsigned(data: Any, name: str) -> int:
    value = _field(data, name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldTypeError(f"field '{name}' must be a number")
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must not be negative, got: {value}")
    return value


@dataclass
class Order:
    """A new order from a client."""

    cl_order_id: str
    market: Market
    security_id: str
    side: Side
    price: float
    qty: int
    shareholder_id: str

    @classmethod
    def from_json(cls, data: Any) -> Order:
        """Decode and validate an order document."""
        order = cls(
            cl_order_id=_string(data, "clOrderId"),
            market=market_from_string(_string(data, "market")),
            security_id=_string(data, "securityId"),
            side=side_from_string(_string(data, "side")),
            price=_number(data, "price"),
            qty=_unsigned(data, "qty"),
            shareholder_id=_string(data, "shareholderId"),
        )
        if order.price <= 0:
            raise ValueError(f"price must be positive, got: {order.price:f}")
        if order.qty == 0:
            raise ValueError("qty must be positive")
        if order.side is Side.BUY and order.qty % 100 != 0:
            raise ValueError(f"buy qty must be a multiple of 100, got: {order.qty}")
        return order


@dataclass
class CancelOrder:
    """A client's request to cancel an earlier order."""

    cl_order_id: str
    orig_cl_order_id: str
    market: Market
    security_id: str
    shareholder_id: str
    side: Side

    @classmethod
    def from_json(cls, data: Any) -> CancelOrder:
        """Decode a cancel document."""
        return cls(
            cl_order_id=_string(data, "clOrderId"),
            orig_cl_order_id=_string(data, "origClOrderId"),
            market=market_from_string(_string(data, "market")),
            security_id=_string(data, "securityId"),
            shareholder_id=_string(data, "shareholderId"),
            side=side_from_string(_string(data, "side")),
        )


@dataclass
class MarketData:
    """Best bid and ask for one security."""

    market: Market
    security_id: str
    bid_price: float
    ask_price: float


class OrderResponseType(Enum):
    CONFIRM = "confirm"
    REJECT = "reject"
    EXECUTION = "execution"


@dataclass
class OrderResponse:
    """Confirmation, rejection or execution report for an order."""

    cl_order_id: str
    market: Market
    security_id: str
    side: Side
    qty: int
    price: float
    shareholder_id: str
    type: OrderResponseType
    reject_code: int = 0
    reject_text: str = ""
    exec_id: str = ""
    exec_qty: int = 0
    exec_price: float = 0.0


class CancelResponseType(Enum):
    CONFIRM = "confirm"
    REJECT = "reject"


@dataclass
class CancelResponse:
    """Confirmation or rejection of a cancel request."""

    orig_cl_order_id: str
    type: CancelResponseType
    cl_order_id: str = ""
    market: Market = Market.UNKNOWN
    security_id: str = ""
    shareholder_id: str = ""
    side: Side = Side.UNKNOWN
    qty: int = 0
    price: float = 0.0
    cum_qty: int = 0
    canceled_qty: int = 0
    reject_code: int = 0
    reject_text: str = ""