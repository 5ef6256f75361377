# file: trade_logger.py
import json
from datetime import datetime, timezone

from db_utils import get_db_connection


def log_event(event_type: str, payload: dict):
    """
    Пишет событие в таблицу 'trade_log' и дублирует его в консоль.

    Args:
        event_type (str): Тип события ('ORDER_PLACED', 'PARSE_FAULT', ...).
        payload (dict): Дополнительные данные о событии.
    """
    conn = None
    try:
        conn = get_db_connection()

        # Enums, Decimals etc. are stored as their string form
        serializable_payload = {k: str(v) for k, v in payload.items()}
        record = {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(timespec='microseconds'),
            "event_type": event_type,
            "payload_json": json.dumps(serializable_payload),
        }

        with conn:
            conn.execute(
                "INSERT INTO trade_log (timestamp_utc, event_type, payload_json) VALUES (:timestamp_utc, :event_type, :payload_json)",
                record
            )

        print(f"[LOG] Event: {event_type} | Payload: {payload}")

    except Exception as e:
        # Logging must never take the caller down
        print(f"[LOGGING_ERROR] Failed to log event '{event_type}'. Error: {e}")
    finally:
        if conn:
            conn.close()


def log_order_request(order: dict):
    log_event("ORDER_FORMATTED", payload=order)


def log_trade_execution(result: dict):
    """
    Логирует результат отправки ордера: ORDER_FAILED если есть 'error', иначе ORDER_PLACED.
    """
    payload = result.copy()
    event_type = "ORDER_FAILED" if payload.get('error') else "ORDER_PLACED"
    log_event(event_type, payload=payload)
