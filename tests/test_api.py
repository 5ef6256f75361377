# file: tests/test_api.py
import pytest
from models import ExecutionResult, OrderRequest, OrderType, ParseError

GOLD_SELL = "Sell XAUUSD @1900-1895 SL:1880 Targets: 1870-1860-1850"
RISK = {"account_balance": 10000, "risk_percent": 1, "leverage": 100}


def test_ping(test_app_client):
    response = test_app_client.get("/ping")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "mode": "demo"}


def test_parse_endpoint(test_app_client):
    response = test_app_client.post("/parse", json={"text": GOLD_SELL})

    assert response.status_code == 200
    data = response.json()
    assert data["symbol"] == "XAUUSD"
    assert data["direction"] == "SELL"
    assert data["entry_max"] == 1895.0
    assert data["targets"] == [1870.0, 1860.0, 1850.0]


def test_parse_fault_returns_400(test_app_client, mocker):
    mocker.patch('main.parse_instruction', return_value=ParseError(detail="boom"))
    response = test_app_client.post("/parse", json={"text": GOLD_SELL})

    assert response.status_code == 400
    assert "check input format" in response.json()["detail"]


def test_sizing_endpoint(test_app_client):
    response = test_app_client.post("/sizing", json={"text": GOLD_SELL, "risk": RISK})

    assert response.status_code == 200
    data = response.json()
    assert data["risk_amount"] == "100.00"
    assert data["max_position_size"] == "50.00"
    assert data["stop_distance_pips"] == pytest.approx(200.0)


def test_sizing_rejects_risk_above_limit(test_app_client):
    response = test_app_client.post("/sizing", json={"text": GOLD_SELL, "risk": {**RISK, "risk_percent": 10}})
    assert response.status_code == 422


def test_overlay_endpoint(test_app_client):
    response = test_app_client.post("/overlay", json={"text": GOLD_SELL})

    assert response.status_code == 200
    assert [m["label"] for m in response.json()] == ["Entry", "SL", "TP1", "TP2", "TP3"]


def test_place_order_accepts_and_submits_in_background(test_app_client, mock_submit_in_background):
    response = test_app_client.post("/orders", json={"text": GOLD_SELL, "risk": RISK})

    assert response.status_code == 202, f"API returned an unexpected status. Body: {response.text}"
    data = response.json()
    assert data["status"] == "accepted"
    assert data["order"]["order_type"] == "LIMIT"
    assert data["order"]["volume"] == 50.0

    mock_submit_in_background.assert_called_once()
    order = mock_submit_in_background.call_args.args[0]
    assert isinstance(order, OrderRequest)
    assert order.take_profit == 1870.0


def test_place_order_with_explicit_volume(test_app_client, mock_submit_in_background):
    response = test_app_client.post("/orders", json={"text": "Buy EURUSD @1.1250 SL:1.1200", "volume": 0.3})

    assert response.status_code == 202
    assert response.json()["order"]["order_type"] == OrderType.STOP.value
    assert response.json()["order"]["volume"] == 0.3


def test_place_order_needs_volume_or_risk(test_app_client, mock_submit_in_background):
    response = test_app_client.post("/orders", json={"text": GOLD_SELL})
    assert response.status_code == 400
    mock_submit_in_background.assert_not_called()


def test_place_order_zero_size_is_rejected(test_app_client, mock_submit_in_background):
    response = test_app_client.post("/orders", json={"text": "Sell XAUUSD @1900 SL:1900", "risk": RISK})
    assert response.status_code == 400
    assert "zero" in response.json()["detail"]


@pytest.mark.asyncio
async def test_submit_in_background_uses_gateway(mock_gateway_main):
    from main import submit_in_background
    from order_formatter import format_order
    from signal_parser import parse_instruction

    mock_gateway_main.submit_order.return_value = ExecutionResult(success=False, error="Rejected")
    order = format_order(parse_instruction(GOLD_SELL), volume=1.0)

    result = await submit_in_background(order)

    mock_gateway_main.submit_order.assert_awaited_once_with(order)
    assert result.error == "Rejected"


def test_place_order_without_any_price_is_rejected(test_app_client, mock_submit_in_background):
    response = test_app_client.post("/orders", json={"text": "Sell XAUUSD SL:1880", "volume": 1})

    assert response.status_code == 400
    assert "price" in response.json()["detail"]
    mock_submit_in_background.assert_not_called()
