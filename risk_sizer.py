# File: risk_sizer.py
from typing import Optional

from models import ParsedInstruction, PositionSizing, RiskParameters
from pip_table import DEFAULT_PIP_TABLE, PipValueTable

MAX_LEVERAGE = 1500

ZERO_SIZING = PositionSizing()


def compute_sizing(
    instruction: ParsedInstruction,
    risk_params: RiskParameters,
    pip_table: PipValueTable = DEFAULT_PIP_TABLE,
    current_price: Optional[float] = None,
) -> PositionSizing:
    """
    Риск-ориентированный размер позиции.

    Without a stop-loss or a reference entry (entry_min, else current_price)
    there is nothing to size and a zero sizing is returned.
    """
    pip_value = pip_table.pip_size(instruction.symbol)
    reference_entry = instruction.entry_min if instruction.entry_min is not None else current_price

    if instruction.stop_loss is None or reference_entry is None:
        return ZERO_SIZING

    stop_distance_pips = abs(reference_entry - instruction.stop_loss) / pip_value
    if stop_distance_pips == 0:
        return ZERO_SIZING

    risk_amount = risk_params.account_balance * risk_params.risk_percent / 100
    effective_leverage = min(risk_params.leverage, MAX_LEVERAGE)
    max_position_size = (risk_amount / stop_distance_pips) * effective_leverage

    return PositionSizing(
        risk_amount=risk_amount,
        max_position_size=max_position_size,
        stop_distance_pips=stop_distance_pips,
    )
