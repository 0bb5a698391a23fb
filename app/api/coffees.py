"""
Coffee Catalog API - catalog lookups and the per-coffee order event stream.

Routes:
- GET /coffees                 list the catalog
- GET /coffees/{id}            one coffee (404 if unknown)
- GET /coffees/{id}/orders     Server-Sent Events, one order per tick
"""
import json
import logging
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from app.application.coffee_service import CoffeeService
from app.config import settings
from app.db.connection import get_unit_of_work
from app.domain.entities import CoffeeOrder
from app.services.order_stream import OrderStream

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Pydantic Models
# ============================================

class CoffeeResponse(BaseModel):
    """Catalog item"""
    id: str = Field(..., description="Coffee ID (UUID)")
    name: str = Field(..., description="Coffee name")


# ============================================
# Dependencies
# ============================================

def get_coffee_service() -> CoffeeService:
    """Build the service per request (reads settings at call time)"""
    return CoffeeService(get_unit_of_work, order_interval=settings.order_interval_seconds)


# ============================================
# SSE framing
# ============================================

def format_order_event(order: CoffeeOrder) -> str:
    """Frame one order as an SSE message"""
    return f"data: {json.dumps(order.to_dict())}\n\n"


async def order_event_generator(stream: OrderStream) -> AsyncIterator[str]:
    """
    Generate SSE events for this client.

    Starlette cancels this generator when the client disconnects; the finally
    block stops the stream's ticker.
    """
    logger.info(f"📡 Order stream opened for coffee {stream.coffee_id}")
    try:
        async for order in stream:
            yield format_order_event(order)
    finally:
        logger.info(
            f"Order stream closed for coffee {stream.coffee_id} "
            f"({stream.delivered} delivered, {stream.dropped} dropped)"
        )
        await stream.close()


# ============================================
# Routes
# ============================================

@router.get("/coffees", response_model=List[CoffeeResponse])
async def all_coffees(service: CoffeeService = Depends(get_coffee_service)):
    """List every coffee in the catalog"""
    coffees = await service.get_all()
    return [CoffeeResponse(**c.to_dict()) for c in coffees]


@router.get("/coffees/{coffee_id}", response_model=CoffeeResponse)
async def coffee_by_id(
    coffee_id: str,
    service: CoffeeService = Depends(get_coffee_service)
):
    """
    Get one coffee.

    Unknown ids raise CoffeeNotFoundError, mapped to 404 in app.main.
    """
    coffee = await service.get_by_id(coffee_id)
    return CoffeeResponse(**coffee.to_dict())


@router.get("/coffees/{coffee_id}/orders")
async def coffee_orders(
    coffee_id: str,
    service: CoffeeService = Depends(get_coffee_service)
):
    """
    Server-Sent Events endpoint streaming synthetic orders for a coffee.

    Each event: data: {"coffeeId": ..., "whenOrdered": ...}
    The stream stays open until the client disconnects. Orders the client
    is too slow to read are dropped, not buffered.
    """
    stream = await service.get_orders(coffee_id, validate=settings.validate_order_coffee_id)

    return StreamingResponse(
        order_event_generator(stream),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        }
    )
