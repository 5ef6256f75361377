# file: main.py
import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from config import get_exchange_credentials, get_exchange_id, is_demo_mode, is_testnet
from chart_overlay import project_markers
from db_setup import setup_database
from execution_gateway import CcxtExecutionGateway, DemoExecutionGateway
from models import OrderRequest, ParsedInstruction, ParseError, RiskParameters
from order_formatter import format_order
from risk_sizer import compute_sizing
from signal_parser import parse_instruction
from trade_logger import log_event, log_order_request


def create_gateway():
    if is_demo_mode():
        return DemoExecutionGateway()
    api_key, secret = get_exchange_credentials()
    return CcxtExecutionGateway(get_exchange_id(), api_key, secret, testnet=is_testnet())


execution_gateway = create_gateway()
background_tasks = set()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_database()
    await execution_gateway.init()
    log_event("APP_STARTUP", {"mode": execution_gateway.mode})

    yield

    log_event("APP_SHUTDOWN", {"message": "Cancelling background tasks."})
    for task in list(background_tasks):
        task.cancel()
    await execution_gateway.close()


app = FastAPI(title="Trading Instruction Service", version="1.0.0", lifespan=lifespan)


class InstructionBody(BaseModel):
    text: str


class SizingBody(InstructionBody):
    risk: RiskParameters
    current_price: Optional[float] = Field(default=None, gt=0)


class OrderBody(InstructionBody):
    volume: Optional[float] = Field(default=None, gt=0)
    risk: Optional[RiskParameters] = None
    current_price: Optional[float] = Field(default=None, gt=0)


def parse_or_400(text: str) -> ParsedInstruction:
    parsed = parse_instruction(text)
    if isinstance(parsed, ParseError):
        raise HTTPException(status_code=400, detail=parsed.message)
    return parsed


async def submit_in_background(order: OrderRequest):
    # Outcome is logged by the gateway; the HTTP request has already returned
    result = await execution_gateway.submit_order(order)
    log_event("ORDER_OUTCOME", {"success": result.success, "order_id": result.order_id, "error": result.error})
    return result


@app.get("/ping")
async def ping():
    return {"status": "ok", "mode": execution_gateway.mode}


@app.post("/parse")
async def parse(body: InstructionBody):
    return parse_or_400(body.text).model_dump(mode="json")


@app.post("/sizing")
async def sizing(body: SizingBody):
    instruction = parse_or_400(body.text)
    result = compute_sizing(instruction, body.risk, current_price=body.current_price)
    return {
        "symbol": instruction.symbol,
        "stop_distance_pips": result.stop_distance_pips,
        "risk_amount": result.risk_amount_display,
        "max_position_size": result.max_position_size_display,
    }


@app.post("/overlay")
async def overlay(body: InstructionBody):
    instruction = parse_or_400(body.text)
    return [marker.model_dump() for marker in project_markers(instruction)]


@app.post("/orders", status_code=202)
async def place_order(body: OrderBody):
    instruction = parse_or_400(body.text)

    volume = body.volume
    if volume is None:
        if body.risk is None:
            raise HTTPException(status_code=400, detail="Either volume or risk parameters are required.")
        volume = round(compute_sizing(instruction, body.risk, current_price=body.current_price).max_position_size, 2)
    if volume <= 0:
        raise HTTPException(status_code=400, detail="Calculated position size is zero.")

    order = format_order(instruction, volume, body.current_price)
    if order.price is None:
        raise HTTPException(status_code=400, detail="No entry price and no current price supplied.")
    log_order_request(order.model_dump(mode="json"))

    task = asyncio.create_task(submit_in_background(order))
    background_tasks.add(task)
    task.add_done_callback(background_tasks.discard)

    return {"status": "accepted", "order": order.model_dump(mode="json")}
