from enum import Enum

from pydantic import BaseModel, ConfigDict


class Tier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"
    BUSINESS = "business"

    def __str__(self):
        return self.value


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Tier
    name: str
    price: float
    calls: int


DEFAULT_PLANS = {
    Tier.BASIC: Plan(id=Tier.BASIC, name="Basic", price=5, calls=1_000),
    Tier.PRO: Plan(id=Tier.PRO, name="Pro", price=15, calls=10_000),
    Tier.BUSINESS: Plan(id=Tier.BUSINESS, name="Business", price=50, calls=100_000),
}
