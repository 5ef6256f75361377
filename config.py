# file: config.py
import os

from dotenv import load_dotenv

load_dotenv()

TRUE_VALUES = {"1", "true", "yes", "on"}


def get_exchange_id() -> str:
    return os.getenv("EXCHANGE_ID", "bybit")


def get_exchange_credentials():
    """(key, secret) из окружения. Пустые значения означают демо-режим."""
    return os.getenv("EXCHANGE_KEY") or None, os.getenv("EXCHANGE_SECRET") or None


def is_testnet() -> bool:
    return os.getenv("EXCHANGE_TESTNET", "true").strip().lower() in TRUE_VALUES


def is_demo_mode() -> bool:
    key, secret = get_exchange_credentials()
    return not key or not secret
