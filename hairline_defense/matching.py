"""Order book with price-time priority matching, cancels and quantity reductions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count

from .models import (
    CancelResponse,
    CancelResponseType,
    MarketData,
    Order,
    OrderResponse,
    OrderResponseType,
    Side,
)

logger = logging.getLogger(__name__)

_EXEC_ID_MODULUS = 10**16
_ROUND_LOT = 100


@dataclass
class MatchResult:
    """Executions produced by one match and the taker's unfilled quantity."""

    executions: list[OrderResponse] = field(default_factory=list)
    remaining_qty: int = 0


@dataclass
class _BookEntry:
    order: Order
    remaining_qty: int
    cum_qty: int = 0


def _buy_taker_qty(maker_remaining: int, match_qty: int) -> int:
    # A buy taker trades whole lots unless the resting seller holds an odd lot.
    if maker_remaining >= _ROUND_LOT and match_qty >= _ROUND_LOT:
        return match_qty // _ROUND_LOT * _ROUND_LOT
    return match_qty


def _sell_taker_qty(maker_remaining: int, match_qty: int) -> int:
    # Avoid leaving a resting buyer with an odd lot of 1..99 shares.
    if maker_remaining >= _ROUND_LOT and match_qty > 0:
        leftover = maker_remaining - match_qty
        if 0 < leftover < _ROUND_LOT:
            reduce_by = _ROUND_LOT - leftover
            if match_qty > reduce_by:
                match_qty -= reduce_by
    return match_qty


class MatchingEngine:
    """Keeps bid and ask books and matches incoming orders against them.

    Not thread safe: callers must serialise access.
    """

    def __init__(self) -> None:
        self._bids: dict[float, list[_BookEntry]] = {}
        self._asks: dict[float, list[_BookEntry]] = {}
        self._index: dict[str, tuple[float, Side]] = {}
        self._exec_ids = count(1)

    def _generate_exec_id(self) -> str:
        return f"EXEC{next(self._exec_ids) % _EXEC_ID_MODULUS:016d}"

    def _book(self, side: Side) -> dict[float, list[_BookEntry]]:
        return self._bids if side is Side.BUY else self._asks

    def add_order(self, order: Order) -> None:
        """Rest an order in the book; a duplicate clOrderId is ignored."""
        if order.cl_order_id in self._index:
            return
        self._book(order.side).setdefault(order.price, []).append(
            _BookEntry(order=order, remaining_qty=order.qty)
        )
        self._index[order.cl_order_id] = (order.price, order.side)

    def match(self, order: Order, market_data: MarketData | None = None) -> MatchResult | None:
        """Match an order against the opposite book without resting it.

        Matched resting orders are reduced or removed. Returns None when nothing traded.
        """
        if order.side is Side.BUY:
            book = self._asks
            prices = sorted(book)
            crosses: Callable[[float], bool] = lambda level: order.price >= level
            blocked = (
                market_data is not None
                and market_data.ask_price > 0
                and order.price > market_data.ask_price
            )
            adjust = _buy_taker_qty
        else:
            book = self._bids
            prices = sorted(book, reverse=True)
            crosses = lambda level: level >= order.price
            blocked = (
                market_data is not None
                and market_data.bid_price > 0
                and order.price < market_data.bid_price
            )
            adjust = _sell_taker_qty

        result = MatchResult()
        remaining = order.qty
        for price in prices:
            if remaining == 0 or not crosses(price) or blocked:
                break
            survivors: list[_BookEntry] = []
            for entry in book[price]:
                if remaining == 0 or entry.order.security_id != order.security_id:
                    survivors.append(entry)
                    continue
                qty = adjust(entry.remaining_qty, min(remaining, entry.remaining_qty))
                if qty == 0:
                    survivors.append(entry)
                    continue
                maker = entry.order
                result.executions.append(
                    OrderResponse(
                        cl_order_id=maker.cl_order_id,
                        market=maker.market,
                        security_id=maker.security_id,
                        side=maker.side,
                        qty=maker.qty,
                        price=maker.price,
                        shareholder_id=maker.shareholder_id,
                        type=OrderResponseType.EXECUTION,
                        exec_id=self._generate_exec_id(),
                        exec_qty=qty,
                        exec_price=maker.price,
                    )
                )
                entry.remaining_qty -= qty
                entry.cum_qty += qty
                remaining -= qty
                if entry.remaining_qty == 0:
                    self._index.pop(maker.cl_order_id, None)
                else:
                    survivors.append(entry)
            if survivors:
                book[price] = survivors
            else:
                del book[price]

        result.remaining_qty = remaining
        return result if result.executions else None

    def cancel_order(self, cl_order_id: str) -> CancelResponse:
        """Remove an order from the book and report what was canceled."""
        location = self._index.get(cl_order_id)
        if location is None:
            return CancelResponse(
                orig_cl_order_id=cl_order_id,
                type=CancelResponseType.REJECT,
                reject_code=1,
                reject_text="Order not found in book",
            )

        price, side = location
        book = self._book(side)
        level = book.get(price, [])
        entry = next((e for e in level if e.order.cl_order_id == cl_order_id), None)
        del self._index[cl_order_id]

        if entry is None:
            logger.critical(
                "[MatchingEngine] CRITICAL: Order index inconsistency for clOrderId=%s",
                cl_order_id,
            )
            return CancelResponse(
                orig_cl_order_id=cl_order_id,
                type=CancelResponseType.REJECT,
                reject_code=2,
                reject_text="Order index inconsistency",
            )

        level.remove(entry)
        if not level:
            del book[price]
        order = entry.order
        return CancelResponse(
            orig_cl_order_id=cl_order_id,
            type=CancelResponseType.CONFIRM,
            cl_order_id=order.cl_order_id,
            market=order.market,
            security_id=order.security_id,
            shareholder_id=order.shareholder_id,
            side=order.side,
            qty=order.qty,
            price=order.price,
            cum_qty=entry.cum_qty,
            canceled_qty=entry.remaining_qty,
        )

    def reduce_order_qty(self, cl_order_id: str, qty: int) -> None:
        """Reduce a resting order's quantity, removing it when nothing is left."""
        location = self._index.get(cl_order_id)
        if location is None:
            return
        price, side = location
        book = self._book(side)
        level = book.get(price)
        if level is None:
            return
        entry = next((e for e in level if e.order.cl_order_id == cl_order_id), None)
        if entry is None:
            return
        entry.cum_qty += qty
        if qty >= entry.remaining_qty:
            entry.remaining_qty = 0
            level.remove(entry)
            if not level:
                del book[price]
            del self._index[cl_order_id]
        else:
            entry.remaining_qty -= qty