# file: models.py
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"


class TimeInForce(str, Enum):
    GTC = "GTC"


class FillPolicy(str, Enum):
    FOK = "FOK"


class ParsedInstruction(BaseModel):
    """Структурированная инструкция, полученная из парсера."""
    model_config = ConfigDict(frozen=True)

    symbol: str = ""
    direction: Direction
    entry_min: Optional[float] = None
    entry_max: Optional[float] = None
    stop_loss: Optional[float] = None
    targets: Tuple[float, ...] = ()

    @model_validator(mode="after")
    def _entry_zone_has_lower_bound(self):
        if self.entry_max is not None and self.entry_min is None:
            raise ValueError("entry_max requires entry_min")
        return self


class ParseError(BaseModel):
    """Ошибка парсинга: текст для пользователя + внутренняя причина."""
    model_config = ConfigDict(frozen=True)

    message: str = "Could not parse instruction, check input format."
    detail: str = ""


class RiskParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_balance: float = Field(..., gt=0)
    risk_percent: float = Field(..., gt=0, le=5)
    leverage: int = Field(..., gt=0)


class PositionSizing(BaseModel):
    """Full-precision sizing; the *_display properties are what a UI shows."""
    model_config = ConfigDict(frozen=True)

    risk_amount: float = 0.0
    max_position_size: float = 0.0
    stop_distance_pips: float = 0.0

    @property
    def risk_amount_display(self) -> str:
        return f"{self.risk_amount:.2f}"

    @property
    def max_position_size_display(self) -> str:
        return f"{self.max_position_size:.2f}"


class Marker(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: float
    label: str
    color_class: str


class OrderRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    side: OrderSide
    order_type: OrderType
    volume: float
    price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    comment: str = ""
    time_in_force: TimeInForce = TimeInForce.GTC
    fill_policy: FillPolicy = FillPolicy.FOK
    deviation: int


class ExecutionResult(BaseModel):
    """Ответ шлюза исполнения. Ядро передает его дальше без изменений."""
    model_config = ConfigDict(frozen=True)

    success: bool
    order_id: Optional[str] = None
    error: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)
