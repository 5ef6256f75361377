# file: order_formatter.py
from typing import Optional

from models import (
    Direction,
    FillPolicy,
    OrderRequest,
    OrderSide,
    OrderType,
    ParsedInstruction,
    TimeInForce,
)

# Slippage tolerance in points
DEFAULT_DEVIATION = 20

SIDES = {
    Direction.BUY: OrderSide.BUY,
    Direction.SELL: OrderSide.SELL,
}


def format_order(
    instruction: ParsedInstruction,
    volume: float,
    current_price: Optional[float] = None,
) -> OrderRequest:
    """
    Builds a broker-neutral order from a parsed instruction.

    Only the first target goes on the order as take-profit; the rest are
    counted in the comment.
    """
    order_type = OrderType.LIMIT if instruction.entry_max is not None else OrderType.STOP
    price = instruction.entry_min if instruction.entry_min is not None else current_price
    take_profit = instruction.targets[0] if instruction.targets else None

    return OrderRequest(
        symbol=instruction.symbol,
        side=SIDES[instruction.direction],
        order_type=order_type,
        volume=volume,
        price=price,
        stop_loss=instruction.stop_loss,
        take_profit=take_profit,
        comment=f"Auto order with {len(instruction.targets)} TP levels",
        time_in_force=TimeInForce.GTC,
        fill_policy=FillPolicy.FOK,
        deviation=DEFAULT_DEVIATION,
    )
