"""Pre-trade risk checks: detection of cross trades by one shareholder."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from .models import Market, Order, Side

_Key = tuple[str, Market, str]


class RiskCheckResult(Enum):
    PASSED = "passed"
    CROSS_TRADE = "cross_trade"


@dataclass
class _OrderInfo:
    key: _Key
    side: Side
    price: float
    remaining_qty: int


class RiskController:
    """Tracks resting quantity per shareholder, market and security to spot cross trades."""

    def __init__(self) -> None:
        self._resting: dict[Side, defaultdict[_Key, int]] = {
            Side.BUY: defaultdict(int),
            Side.SELL: defaultdict(int),
        }
        self._orders: dict[str, _OrderInfo] = {}

    @staticmethod
    def _key(order: Order) -> _Key:
        return (order.shareholder_id, order.market, order.security_id)

    def check_order(self, order: Order) -> RiskCheckResult:
        """Return CROSS_TRADE if the order would trade against its own side, else PASSED."""
        if self.is_cross_trade(order):
            return RiskCheckResult.CROSS_TRADE
        return RiskCheckResult.PASSED

    def is_cross_trade(self, order: Order) -> bool:
        """True if the same shareholder has opposite-side quantity resting in the security."""
        opposite = {Side.BUY: Side.SELL, Side.SELL: Side.BUY}.get(order.side)
        if opposite is None:
            return False
        return self._resting[opposite].get(self._key(order), 0) > 0

    def on_order_accepted(self, order: Order) -> None:
        """Record an accepted order so later orders are checked against it."""
        key = self._key(order)
        self._orders[order.cl_order_id] = _OrderInfo(key, order.side, order.price, order.qty)
        if order.side in self._resting:
            self._resting[order.side][key] += order.qty

    def _reduce(self, info: _OrderInfo, qty: int) -> None:
        book = self._resting.get(info.side)
        if book is None or info.key not in book:
            return
        remaining = max(book[info.key] - qty, 0)
        if remaining:
            book[info.key] = remaining
        else:
            del book[info.key]

    def on_order_canceled(self, orig_cl_order_id: str) -> None:
        """Forget a canceled order and its remaining quantity."""
        info = self._orders.pop(orig_cl_order_id, None)
        if info is not None:
            self._reduce(info, info.remaining_qty)

    def on_order_executed(self, cl_order_id: str, exec_qty: int) -> None:
        """Reduce an order's remaining quantity by an execution."""
        info = self._orders.get(cl_order_id)
        if info is None:
            return
        reduce_qty = min(exec_qty, info.remaining_qty)
        self._reduce(info, reduce_qty)
        info.remaining_qty -= reduce_qty
        if info.remaining_qty == 0:
            del self._orders[cl_order_id]