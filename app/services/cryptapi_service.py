from urllib.parse import urlencode

import httpx
import sentry_sdk
import structlog
from pydantic import ValidationError

from app.models.cryptapi.address import CreateAddressResponse
from app.settings import settings

logger = structlog.get_logger(__name__)


class PaymentProcessorUnavailableError(Exception):
    pass


class CryptapiService:
    api_url = settings.payment.api_url
    callback_path = "/webhooks/cryptapi"

    def get_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.payment.timeout)

    def build_callback_url(self, order_id: str) -> str:
        return f"{settings.public_base_url.rstrip('/')}{self.callback_path}?{urlencode({'order_id': order_id})}"

    async def create_address(self, callback_url: str, client: httpx.AsyncClient) -> CreateAddressResponse:
        """
        Asks the processor for a one-time deposit address forwarding to our wallet.
        ``pending=1`` makes the processor call back for unconfirmed transactions too.
        """
        try:
            response = await client.get(
                f"{self.api_url}/{settings.payment.ticker}/create/",
                params={
                    "callback": callback_url,
                    "address": settings.payment.wallet_address,
                    "pending": 1,
                    "json": 1,
                }
            )
            response.raise_for_status()
            address = CreateAddressResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error("Failed to create deposit address", error=repr(e), callback_url=callback_url)
            sentry_sdk.capture_exception(e)
            raise PaymentProcessorUnavailableError("Payment processor unavailable") from e

        if address.status != "success" or not address.address_in:
            logger.error("Payment processor refused to create address", response=address.model_dump())
            sentry_sdk.set_context("cryptapi", {"response": address.model_dump(), "callback_url": callback_url})
            sentry_sdk.capture_message("Payment processor refused to create address")
            raise PaymentProcessorUnavailableError(address.error or "Payment processor returned no address")
        return address

    async def create_deposit_address(self, order_id: str) -> CreateAddressResponse:
        async with self.get_http_client() as client:
            return await self.create_address(self.build_callback_url(order_id), client)
