# file: session_state.py
"""
Состояние торговой сессии как явная стейт-машина.

EMPTY -> PARSED -> SIZED -> SUBMITTED, any of them -> FAILED.
reduce() never mutates: every event produces a new SessionState.
"""
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from chart_overlay import project_markers
from models import (
    ExecutionResult,
    Marker,
    OrderRequest,
    ParsedInstruction,
    ParseError,
    PositionSizing,
    RiskParameters,
)
from order_formatter import format_order
from pip_table import DEFAULT_PIP_TABLE, PipValueTable
from risk_sizer import compute_sizing
from signal_parser import parse_instruction


class SessionStatus(str, Enum):
    EMPTY = "EMPTY"
    PARSED = "PARSED"
    SIZED = "SIZED"
    SUBMITTED = "SUBMITTED"
    FAILED = "FAILED"


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.EMPTY
    instruction: Optional[ParsedInstruction] = None
    markers: List[Marker] = []
    risk_params: Optional[RiskParameters] = None
    current_price: Optional[float] = None
    sizing: Optional[PositionSizing] = None
    order: Optional[OrderRequest] = None
    result: Optional[ExecutionResult] = None
    error: Optional[str] = None


class InstructionEntered(BaseModel):
    text: str


class RiskInputsChanged(BaseModel):
    risk_params: RiskParameters
    current_price: Optional[float] = None


class OrderRequested(BaseModel):
    volume: Optional[float] = None


class ExecutionFinished(BaseModel):
    result: ExecutionResult


SessionEvent = Union[InstructionEntered, RiskInputsChanged, OrderRequested, ExecutionFinished]


def _sized(state: SessionState, pip_table: PipValueTable) -> SessionState:
    if state.instruction is None or state.risk_params is None:
        return state
    sizing = compute_sizing(state.instruction, state.risk_params, pip_table, state.current_price)
    # Re-sizing starts a new attempt: the previous order and its outcome no longer apply
    return state.model_copy(update={
        "status": SessionStatus.SIZED,
        "sizing": sizing,
        "order": None,
        "result": None,
        "error": None,
    })


def _on_instruction(state: SessionState, event: InstructionEntered, pip_table: PipValueTable) -> SessionState:
    # New text replaces the previous instruction; only the risk inputs carry over
    base = SessionState(risk_params=state.risk_params, current_price=state.current_price)
    if not event.text.strip():
        return base

    parsed = parse_instruction(event.text)
    if isinstance(parsed, ParseError):
        return base.model_copy(update={"status": SessionStatus.FAILED, "error": parsed.message})

    parsed_state = base.model_copy(update={
        "status": SessionStatus.PARSED,
        "instruction": parsed,
        "markers": project_markers(parsed),
    })
    return _sized(parsed_state, pip_table)


def _on_risk_inputs(state: SessionState, event: RiskInputsChanged, pip_table: PipValueTable) -> SessionState:
    updated = state.model_copy(update={
        "risk_params": event.risk_params,
        "current_price": event.current_price,
    })
    return _sized(updated, pip_table)


def _failed(state: SessionState, error: str) -> SessionState:
    return state.model_copy(update={"status": SessionStatus.FAILED, "error": error})


def _on_order_requested(state: SessionState, event: OrderRequested) -> SessionState:
    if state.instruction is None:
        return _failed(state, "No instruction to submit.")

    volume = event.volume
    if volume is None:
        volume = round(state.sizing.max_position_size, 2) if state.sizing else 0.0
    if volume <= 0:
        return _failed(state, "Calculated position size is zero.")

    order = format_order(state.instruction, volume, state.current_price)
    if order.price is None:
        return _failed(state, "No entry price and no current price supplied.")

    return state.model_copy(update={
        "status": SessionStatus.SUBMITTED,
        "order": order,
        "result": None,
        "error": None,
    })


def _on_execution_finished(state: SessionState, event: ExecutionFinished) -> SessionState:
    if event.result.success:
        return state.model_copy(update={"status": SessionStatus.SUBMITTED, "result": event.result})
    return state.model_copy(update={
        "status": SessionStatus.FAILED,
        "result": event.result,
        "error": event.result.error,
    })


def reduce(
    state: SessionState,
    event: SessionEvent,
    pip_table: PipValueTable = DEFAULT_PIP_TABLE,
) -> SessionState:
    if isinstance(event, InstructionEntered):
        return _on_instruction(state, event, pip_table)
    if isinstance(event, RiskInputsChanged):
        return _on_risk_inputs(state, event, pip_table)
    if isinstance(event, OrderRequested):
        return _on_order_requested(state, event)
    if isinstance(event, ExecutionFinished):
        return _on_execution_finished(state, event)
    raise TypeError(f"Unknown session event: {type(event).__name__}")
