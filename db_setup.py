# file: db_setup.py
from db_utils import get_db_connection


def setup_database():
    """
    Creates the event log tables. Idempotent, safe to run multiple times.
    """
    print("--- Starting Database Setup ---")
    conn = get_db_connection()
    cursor = conn.cursor()

    try:
        print("1. Creating 'trade_log' table...")
        cursor.execute("""
        CREATE TABLE IF NOT EXISTS trade_log (
           id INTEGER PRIMARY KEY AUTOINCREMENT,
           timestamp_utc TEXT NOT NULL,
           event_type TEXT NOT NULL,
           payload_json TEXT
        );
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_trade_log_event_type ON trade_log(event_type);")
        print("   ... 'trade_log' table is ready.")

        print("2. Setting up schema version...")
        cursor.execute("CREATE TABLE IF NOT EXISTS db_meta (key TEXT PRIMARY KEY, value TEXT NOT NULL);")
        cursor.execute("INSERT OR IGNORE INTO db_meta (key, value) VALUES ('schema_version', '1');")
        print("   ... Schema version is set.")

        conn.commit()
        print("\n--- Database setup successfully completed! ---")

    except Exception as e:
        print(f"\n--- An error occurred during database setup: {e} ---")
        conn.rollback()
    finally:
        conn.close()


if __name__ == "__main__":
    setup_database()
