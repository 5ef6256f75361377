# file: tests/test_config.py
from config import get_exchange_id, is_demo_mode, is_testnet


def test_demo_mode_without_credentials(monkeypatch):
    monkeypatch.delenv("EXCHANGE_KEY", raising=False)
    monkeypatch.setenv("EXCHANGE_SECRET", "secret")
    assert is_demo_mode() is True


def test_live_mode_with_credentials(monkeypatch):
    monkeypatch.setenv("EXCHANGE_KEY", "key")
    monkeypatch.setenv("EXCHANGE_SECRET", "secret")
    assert is_demo_mode() is False


def test_testnet_flag(monkeypatch):
    monkeypatch.setenv("EXCHANGE_TESTNET", "false")
    assert is_testnet() is False
    monkeypatch.setenv("EXCHANGE_TESTNET", "True")
    assert is_testnet() is True


def test_exchange_id_default(monkeypatch):
    monkeypatch.delenv("EXCHANGE_ID", raising=False)
    assert get_exchange_id() == "bybit"
