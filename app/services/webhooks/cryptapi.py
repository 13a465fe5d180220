from typing import Any, Dict, Optional

import sentry_sdk
import structlog

from app.models.cryptapi.callback import PaymentNotification
from app.models.orders import Order, OrderStatus
from app.repository.orders_repository import OrdersRepository, OrderDoesNotExistError
from app.services.api_keys_service import ApiKeysService
from app.services.db.memory import InMemoryDatabase
from app.settings import settings

logger = structlog.get_logger(__name__)


class CryptapiWebhookService:
    model = PaymentNotification

    def __init__(self, db: InMemoryDatabase, confirmation_tolerance: Optional[float] = None):
        self._orders_repository = OrdersRepository(db)
        self._api_keys_service = ApiKeysService(db)
        self.confirmation_tolerance = (
            confirmation_tolerance if confirmation_tolerance is not None
            else settings.payment.confirmation_tolerance
        )

    def _validate_data(self, data: Dict[str, Any]) -> PaymentNotification:
        try:
            return self.model.model_validate(data)
        except Exception as e:
            logger.error("Failed to validate webhook data", data=data, error=str(e))
            sentry_sdk.capture_exception(e)
            raise e

    def is_payment_confirmed(self, order: Order, notification: PaymentNotification) -> bool:
        return (
            notification.is_confirmed
            and notification.value_coin >= order.plan.price * self.confirmation_tolerance
        )

    async def _process_payment_notification(self, notification: PaymentNotification) -> Optional[Order]:
        try:
            order = await self._orders_repository.get_order(notification.order_id)
        except OrderDoesNotExistError:
            logger.warning("Webhook for unknown order", order_id=notification.order_id)
            return None

        if order.status == OrderStatus.COMPLETED:
            logger.info("Order already completed", order_id=order.id)
            return order

        if not self.is_payment_confirmed(order, notification):
            logger.info(
                "Payment not confirmed yet",
                order_id=order.id,
                pending=notification.pending,
                value_coin=notification.value_coin,
                price=order.plan.price,
            )
            return order

        async def mint_key(pending_order: Order) -> str:
            return await self._api_keys_service.mint_key(
                plan=pending_order.plan,
                email=pending_order.email,
                order_id=pending_order.id,
            )

        order, completed_now = await self._orders_repository.complete_with_key(
            order.id, notification.txid_in, mint_key
        )
        if completed_now:
            logger.info("Order completed", order_id=order.id, plan=order.plan.id, txid=order.txid)
        return order

    async def process_webhook_event(self, data: Dict[str, Any]) -> Optional[Order]:
        """
        Never raises: the processor keeps re-delivering a callback until it is acknowledged,
        so every failure is logged and reported instead.
        """
        logger.info("Received payment callback", data=data)
        try:
            notification = self._validate_data(data)
            return await self._process_payment_notification(notification)
        except Exception as e:
            logger.error("Failed to process payment callback", error=repr(e), data=data)
            sentry_sdk.set_context("cryptapi_webhook", {"data": data})
            sentry_sdk.capture_exception(e)
            return None
