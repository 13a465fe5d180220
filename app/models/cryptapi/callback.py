from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentNotification(BaseModel):
    """
    Callback fields sent by the processor, already merged from the query string and the body.
    Only ``order_id``, ``value_coin``, ``pending`` and ``txid_in`` drive the confirmation logic.
    """
    model_config = ConfigDict(extra="ignore")

    order_id: str
    value_coin: float = Field(default=0, allow_inf_nan=False)
    pending: int = 1
    txid_in: Optional[str] = None
    txid_out: Optional[str] = None
    address_in: Optional[str] = None
    coin: Optional[str] = None
    confirmations: Optional[int] = None
    uuid: Optional[str] = None

    @field_validator("pending", mode="before")
    @classmethod
    def _pending_as_int(cls, value):
        # "pending" comes as "0"/"1" in query strings and as bool/int in JSON bodies
        if value is None or value == "":
            return 1
        if isinstance(value, str):
            value = value.strip().lower()
            if value in ("true", "false"):
                return int(value == "true")
        return int(value)

    @property
    def is_confirmed(self) -> bool:
        return self.pending == 0
