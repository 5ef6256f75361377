# file: pip_table.py
from types import MappingProxyType
from typing import Dict, Mapping, Optional

# Standard non-JPY forex pair
DEFAULT_PIP_SIZE = 0.0001

STANDARD_PIP_SIZES = {
    "EURUSD": 0.0001,
    "GBPUSD": 0.0001,
    "AUDUSD": 0.0001,
    "NZDUSD": 0.0001,
    "USDCAD": 0.0001,
    "USDCHF": 0.0001,
    "EURGBP": 0.0001,
    "USDJPY": 0.01,
    "EURJPY": 0.01,
    "GBPJPY": 0.01,
    "AUDJPY": 0.01,
    "CADJPY": 0.01,
    "CHFJPY": 0.01,
    "XAUUSD": 0.1,
    "XAGUSD": 0.01,
}


class PipValueTable:
    """Символ -> размер пипса. Неизвестный символ получает значение по умолчанию."""

    def __init__(self, sizes: Mapping[str, float], default: float = DEFAULT_PIP_SIZE):
        if default <= 0:
            raise ValueError("Default pip size must be positive.")
        for symbol, size in sizes.items():
            if size <= 0:
                raise ValueError(f"Pip size for {symbol} must be positive, got {size}")
        self._sizes = MappingProxyType({k.upper(): float(v) for k, v in sizes.items()})
        self.default = float(default)

    def lookup(self, symbol: str) -> Optional[float]:
        return self._sizes.get((symbol or "").upper())

    def pip_size(self, symbol: str) -> float:
        size = self.lookup(symbol)
        return size if size is not None else self.default

    def with_overrides(self, overrides: Dict[str, float]) -> "PipValueTable":
        merged = dict(self._sizes)
        merged.update({k.upper(): v for k, v in overrides.items()})
        return PipValueTable(merged, self.default)

    def symbols(self):
        return list(self._sizes.keys())

    def __contains__(self, symbol: str) -> bool:
        return self.lookup(symbol) is not None


DEFAULT_PIP_TABLE = PipValueTable(STANDARD_PIP_SIZES)
