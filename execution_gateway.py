# file: execution_gateway.py
import uuid

import ccxt.async_support as ccxt

from models import ExecutionResult, OrderRequest, OrderType
from trade_logger import log_event, log_trade_execution

CCXT_ORDER_TYPES = {
    OrderType.MARKET: 'market',
    OrderType.LIMIT: 'limit',
    # Stop entry = market order triggered at the entry price
    OrderType.STOP: 'market',
}


def to_exchange_symbol(symbol: str) -> str:
    """EURUSD -> EUR/USD. Anything else is passed as is."""
    if len(symbol) == 6 and symbol.isalpha():
        return f"{symbol[:3]}/{symbol[3:]}"
    return symbol


def build_order_params(request: OrderRequest) -> dict:
    params = {'timeInForce': request.time_in_force.value}
    if request.order_type == OrderType.STOP and request.price is not None:
        params['triggerPrice'] = request.price
    if request.stop_loss is not None:
        params['stopLoss'] = request.stop_loss
    if request.take_profit is not None:
        params['takeProfit'] = request.take_profit
    return params


class CcxtExecutionGateway:
    def __init__(self, exchange_id: str, api_key: str, secret_key: str, testnet: bool = True):
        if not api_key or not secret_key:
            raise ValueError("API key and secret must be provided.")

        exchange_class = getattr(ccxt, exchange_id, None)
        if exchange_class is None:
            raise ValueError(f"Unknown exchange: {exchange_id}")

        self.testnet = testnet
        self.exchange = exchange_class({
            'apiKey': api_key,
            'secret': secret_key,
        })
        if self.testnet:
            self.exchange.set_sandbox_mode(True)

    @property
    def mode(self) -> str:
        return "live"

    async def init(self):
        try:
            await self.exchange.load_markets()
            print(f"Successfully connected to {self.exchange.id}. Sandbox mode: {self.testnet}")
        except Exception:
            await self.close()
            raise

    async def close(self):
        if self.exchange:
            await self.exchange.close()

    async def submit_order(self, request: OrderRequest) -> ExecutionResult:
        """Отправляет ордер. Ошибки биржи возвращаются в ExecutionResult, а не бросаются."""
        symbol = to_exchange_symbol(request.symbol)
        order_type = CCXT_ORDER_TYPES[request.order_type]
        price = request.price if order_type == 'limit' else None
        try:
            order = await self.exchange.create_order(
                symbol, order_type, request.side.value, request.volume, price, build_order_params(request)
            )
            log_trade_execution(order)
            order_id = str(order['id']) if order.get('id') is not None else None
            return ExecutionResult(success=True, order_id=order_id, raw=order)
        except Exception as e:
            error_payload = {'symbol': symbol, 'type': order_type, 'side': request.side.value, 'error': str(e)}
            log_trade_execution(error_payload)
            return ExecutionResult(success=False, error=str(e), raw=error_payload)


class DemoExecutionGateway:
    """Demo Mode: без ключей API ордера принимаются локально и никуда не уходят."""

    @property
    def mode(self) -> str:
        return "demo"

    async def init(self):
        log_event("DEMO_GATEWAY_READY", {"message": "No exchange credentials, orders are simulated."})

    async def close(self):
        pass

    async def submit_order(self, request: OrderRequest) -> ExecutionResult:
        order = {'id': f"demo-{uuid.uuid4().hex[:12]}", 'status': 'accepted', **request.model_dump(mode='json')}
        log_trade_execution(order)
        return ExecutionResult(success=True, order_id=order['id'], raw=order)
