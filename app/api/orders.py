from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException

from app.depends.services import get_orders_service
from app.models.orders import CreateOrderDTO, OrderCreatedResDTO, OrderStatusResDTO
from app.repository.orders_repository import OrderDoesNotExistError
from app.services.cryptapi_service import PaymentProcessorUnavailableError
from app.services.orders_service import OrdersService

router = APIRouter(prefix="/orders", tags=["orders"])

logger = structlog.get_logger(__name__)


@router.post("", status_code=201)
async def create_order(
        data: Optional[CreateOrderDTO] = None,
        orders_service: OrdersService = Depends(get_orders_service),
) -> OrderCreatedResDTO:
    if data is None:
        data = CreateOrderDTO()
    try:
        return await orders_service.create_order(data.plan, email=data.email)
    except PaymentProcessorUnavailableError as e:
        logger.error("Order creation failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail="Payment processor unavailable, try again later",
            headers={"Retry-After": "30"},
        )


@router.get("/{order_id}")
async def get_order_status(
        order_id: str,
        orders_service: OrdersService = Depends(get_orders_service),
) -> OrderStatusResDTO:
    try:
        return await orders_service.get_order_status(order_id)
    except OrderDoesNotExistError:
        raise HTTPException(status_code=404, detail="Order not found")
