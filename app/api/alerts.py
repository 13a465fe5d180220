from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.depends.auth import KeyGate, api_key_dependency
from app.depends.services import get_price_service
from app.models.prices import AlertCheckDTO, AlertCheckResDTO, AlertCondition
from app.services.alerts_service import evaluate_alert
from app.services.prices.price_service import PriceService

router = APIRouter(prefix="/alert", tags=["alerts"])


@router.post("/check")
async def check_alert(
        data: AlertCheckDTO,
        key: Annotated[KeyGate, Depends(api_key_dependency)],
        price_service: Annotated[PriceService, Depends(get_price_service)],
) -> AlertCheckResDTO:
    try:
        condition = AlertCondition(data.condition)
    except ValueError:
        raise HTTPException(status_code=400, detail="Condition must be above or below")
    await key.consume()
    quote = await price_service.get_quote(data.type, data.symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail="Symbol not found")
    return evaluate_alert(quote, condition, data.threshold)
