# hairline_defense

A small order-handling core for equity trading, made of three modules:

- `hairline_defense.models`: the order, cancel, market-data and response
  records, the `Side` and `Market` enums, and decoding of JSON-style order
  and cancel documents.
- `hairline_defense.matching`: `MatchingEngine`, an order book with
  price-time priority, execution at the resting (maker) order's price,
  partial fills and round-lot rules.
- `hairline_defense.risk`: `RiskController`, which spots cross trades by
  one shareholder.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Decoding orders

```python
from hairline_defense.models import Order, CancelOrder

order = Order.from_json({
    "clOrderId": "1001",
    "market": "XSHG",
    "securityId": "600030",
    "side": "B",
    "price": 10.5,
    "qty": 1000,
    "shareholderId": "SH001",
})
```

`Order.from_json` raises `MissingFieldError` when a field is absent,
`FieldTypeError` when a field has the wrong type, and `ValueError` for an
unknown market or side, a price that is not positive, a quantity of zero, or
a buy quantity that is not a multiple of 100. Sell orders may be odd lots.
`CancelOrder.from_json` decodes a cancel document the same way.

`to_string`, `side_from_string` and `market_from_string` convert between the
enums and their wire codes (`"B"`/`"S"`; `"XSHG"`, `"XSHE"`, `"BJSE"`).

The module also defines the reject codes `ORDER_CROSS_TRADE_REJECT_CODE` (1,
"Cross trade detected") and `ORDER_INVALID_FORMAT_REJECT_CODE` (2, "Invalid
order format").

## Matching

```python
from hairline_defense.models import Market, Order, Side
from hairline_defense.matching import MatchingEngine

engine = MatchingEngine()
engine.add_order(Order("1001", Market.XSHG, "600030", Side.BUY, 10.0, 1000, "SH001"))
result = engine.match(Order("1002", Market.XSHG, "600030", Side.SELL, 10.0, 500, "SH002"))
# result.executions[0].exec_qty == 500, result.remaining_qty == 0
```

- `match(order, market_data=None)` trades the order against the opposite
  book without resting it. Matched resting orders are reduced or removed.
  It returns `None` when nothing trades, otherwise a `MatchResult` with the
  executions (one `OrderResponse` per resting order hit, each with a unique
  `exec_id` such as `EXEC0000000000000001`) and the taker's `remaining_qty`.
  Resting any remainder is left to the caller. Only orders in the same
  security are matched. If `market_data` is given, a buy priced above its
  ask or a sell priced below its bid does not trade.
- `add_order(order)` rests an order; a repeated `cl_order_id` is ignored.
- `cancel_order(cl_order_id)` removes an order and returns a
  `CancelResponse` with its cumulative filled and canceled quantities, or a
  reject (code 1) when the order is not in the book.
- `reduce_order_qty(cl_order_id, qty)` lowers a resting order's quantity and
  removes it when nothing is left; unknown ids are ignored.

The engine is not thread safe.

## Cross-trade risk control

```python
from hairline_defense.risk import RiskController, RiskCheckResult

risk = RiskController()
risk.on_order_accepted(buy_order)
risk.check_order(sell_order)  # RiskCheckResult.CROSS_TRADE for the same shareholder
```

An order is a cross trade when the same shareholder has remaining quantity
on the opposite side of the same security in the same market.
`on_order_canceled` and `on_order_executed` keep the resting quantities up
to date.

## What the package does not do

There is no message-handling layer that takes order, cancel and exchange
messages and routes results to clients or an exchange, and no command-line
program. The matching engine and risk controller are building blocks; wiring
them together is left to the caller.