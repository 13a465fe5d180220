from typing import Literal, Optional

from pydantic import BaseModel


class CreateAddressResponse(BaseModel):
    status: Literal["success", "error"]
    address_in: Optional[str] = None
    address_out: Optional[str] = None
    callback_url: Optional[str] = None
    minimum_transaction_coin: Optional[float] = None
    priority: Optional[str] = None
    error: Optional[str] = None
