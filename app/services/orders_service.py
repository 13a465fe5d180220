import uuid
from typing import Optional

import structlog

from app.models.orders import (
    Order, OrderCreatedResDTO, OrderStatus, OrderStatusResDTO, PaymentInstructions,
)
from app.models.tier import Plan, Tier
from app.repository.orders_repository import OrdersRepository
from app.services.cryptapi_service import CryptapiService
from app.services.db.memory import InMemoryDatabase
from app.settings import settings
from app.utils.time import utcnow

logger = structlog.get_logger(__name__)


def resolve_plan(selector: Optional[str]) -> Plan:
    """Unknown or missing selectors fall back to the default plan."""
    try:
        tier = Tier((selector or "").strip().lower())
    except ValueError:
        tier = settings.default_plan
    plan = settings.plans.get(tier)
    if plan is None:
        return settings.plans[settings.default_plan]
    return plan


class OrdersService:
    def __init__(self, db: InMemoryDatabase, payment_service: Optional[CryptapiService] = None):
        self._orders_repository = OrdersRepository(db)
        self._payment_service = payment_service or CryptapiService()

    async def create_order(self, plan_selector: Optional[str], email: Optional[str] = None) -> OrderCreatedResDTO:
        plan = resolve_plan(plan_selector)
        order_id = uuid.uuid4().hex
        logger.info("Creating order", order_id=order_id, plan=plan.id, requested_plan=plan_selector)

        # raises PaymentProcessorUnavailableError, nothing is stored in that case
        address = await self._payment_service.create_deposit_address(order_id)

        order = await self._orders_repository.create(Order(
            id=order_id,
            plan=plan,
            email=email,
            payment_address=address.address_in,
            status=OrderStatus.PENDING,
            created_at=utcnow(),
        ))
        logger.info("Order created", order_id=order.id, payment_address=order.payment_address)
        return OrderCreatedResDTO(
            order_id=order.id,
            status=order.status,
            plan=plan,
            payment=PaymentInstructions(
                address=order.payment_address,
                amount=plan.price,
                currency=settings.payment.asset,
                network=settings.payment.network,
                minimum_transaction=address.minimum_transaction_coin,
            ),
            status_url=f"/orders/{order.id}",
        )

    async def get_order_status(self, order_id: str) -> OrderStatusResDTO:
        order = await self._orders_repository.get_order(order_id)
        if order.status == OrderStatus.COMPLETED:
            return OrderStatusResDTO(
                order_id=order.id,
                status=order.status,
                plan=order.plan.name,
                api_key=order.api_key,
                usage=f"Send the key in the {settings.api_key.header_name} header",
            )
        return OrderStatusResDTO(
            order_id=order.id,
            status=order.status,
            plan=order.plan.name,
            payment_address=order.payment_address,
            price=order.plan.price,
            message=f"Waiting for payment of {order.plan.price} {settings.payment.asset}",
        )
