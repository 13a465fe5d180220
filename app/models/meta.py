from pydantic import BaseModel


class HealthResDTO(BaseModel):
    status: str = "ok"
    uptime: float
