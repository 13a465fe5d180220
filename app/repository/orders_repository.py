from typing import Awaitable, Callable, Tuple

import structlog

from app.models.orders import Order, OrderStatus
from app.services.db.memory import InMemoryDatabase
from app.utils.time import utcnow

logger = structlog.get_logger(__name__)


class OrderDoesNotExistError(Exception):
    pass


class OrderAlreadyExistsError(Exception):
    pass


class OrdersRepository:
    table_name = "orders"

    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self.repository = self.db.table(self.table_name)

    async def create(self, order: Order) -> Order:
        async with self.repository.lock:
            if order.id in self.repository.rows:
                raise OrderAlreadyExistsError(order.id)
            self.repository.rows[order.id] = order.model_copy()
        logger.debug("Order stored", order_id=order.id, plan=order.plan.id)
        return order.model_copy()

    async def get_order(self, order_id: str) -> Order:
        order = self.repository.rows.get(order_id)
        if order is None:
            raise OrderDoesNotExistError(order_id)
        return order.model_copy()

    async def complete_with_key(
            self,
            order_id: str,
            txid: str | None,
            mint_key: Callable[[Order], Awaitable[str]],
    ) -> Tuple[Order, bool]:
        """
        Moves a pending order to completed, minting its key while the table lock is held.
        Returns the order and whether this call did the transition; an order that is already
        completed is returned unchanged and ``mint_key`` is not called.
        """
        async with self.repository.lock:
            order = self.repository.rows.get(order_id)
            if order is None:
                raise OrderDoesNotExistError(order_id)
            if order.status == OrderStatus.COMPLETED:
                return order.model_copy(), False
            api_key = await mint_key(order.model_copy())
            completed = order.model_copy(update={
                "status": OrderStatus.COMPLETED,
                "api_key": api_key,
                "txid": txid,
                "completed_at": utcnow(),
            })
            self.repository.rows[order_id] = completed
        return completed.model_copy(), True
