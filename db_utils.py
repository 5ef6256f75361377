# file: db_utils.py
import sqlite3
import os


def get_db_connection() -> sqlite3.Connection:
    """New connection to the event log DB; DATABASE_FILE is read on every call."""
    db_file = os.getenv("DATABASE_FILE", "events.sqlite")

    conn = sqlite3.connect(db_file, timeout=30, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.row_factory = sqlite3.Row
    return conn
