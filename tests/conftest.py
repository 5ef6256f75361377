# file: tests/conftest.py
import pytest
import os
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from models import ExecutionResult

TEST_DB_FILE = "test_events_db.sqlite"


@pytest.fixture(scope="function", autouse=True)
def setup_for_every_test(monkeypatch, mocker):
    # 1. Isolate the database by deleting files
    monkeypatch.setenv("DATABASE_FILE", TEST_DB_FILE)
    for suffix in ("", "-shm", "-wal"):
        if os.path.exists(f"{TEST_DB_FILE}{suffix}"):
            os.remove(f"{TEST_DB_FILE}{suffix}")

    # 2. Setup schema in the new, clean file
    from db_setup import setup_database
    setup_database()

    # 3. Mock the execution gateway used by the app
    mock_gateway = AsyncMock(name="main_execution_gateway_mock")
    mock_gateway.mode = "demo"
    mock_gateway.init.return_value = None
    mock_gateway.submit_order.return_value = ExecutionResult(success=True, order_id="12345")
    mocker.patch('main.execution_gateway', new=mock_gateway)

    yield


@pytest.fixture
def mock_gateway_main():
    import main
    return main.execution_gateway


@pytest.fixture
def test_app_client():
    """TestClient for the app; the autouse fixture has already cleaned the DB and mocked the gateway."""
    from main import app
    with TestClient(app) as client:
        yield client


@pytest.fixture
def mock_submit_in_background(mocker):
    """Mocks main.submit_in_background so background submission can be asserted synchronously."""
    return mocker.patch('main.submit_in_background', new_callable=AsyncMock)
