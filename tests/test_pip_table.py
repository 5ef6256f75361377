# file: tests/test_pip_table.py
import pytest
from pip_table import DEFAULT_PIP_SIZE, DEFAULT_PIP_TABLE, PipValueTable


def test_known_symbols():
    assert DEFAULT_PIP_TABLE.pip_size("EURUSD") == 0.0001
    assert DEFAULT_PIP_TABLE.pip_size("usdjpy") == 0.01
    assert DEFAULT_PIP_TABLE.pip_size("XAUUSD") == 0.1


def test_unknown_symbol_falls_back_to_default():
    assert DEFAULT_PIP_TABLE.lookup("BTCUSD") is None
    assert DEFAULT_PIP_TABLE.pip_size("BTCUSD") == DEFAULT_PIP_SIZE
    assert DEFAULT_PIP_TABLE.pip_size("") == DEFAULT_PIP_SIZE


def test_with_overrides_returns_new_table():
    table = DEFAULT_PIP_TABLE.with_overrides({"btcusd": 1.0})

    assert table.pip_size("BTCUSD") == 1.0
    assert "BTCUSD" not in DEFAULT_PIP_TABLE


def test_non_positive_pip_size_is_rejected():
    with pytest.raises(ValueError):
        PipValueTable({"EURUSD": 0})
