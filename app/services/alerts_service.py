from app.models.prices import AlertCheckResDTO, AlertCondition, Quote
from app.utils.time import utcnow


def evaluate_alert(quote: Quote, condition: AlertCondition, threshold: float) -> AlertCheckResDTO:
    if condition == AlertCondition.ABOVE:
        triggered = quote.price >= threshold
        message = f"🚀 {quote.symbol} is above ${threshold}: ${quote.price}"
    else:
        triggered = quote.price <= threshold
        message = f"📉 {quote.symbol} is below ${threshold}: ${quote.price}"
    if not triggered:
        message = f"{quote.symbol} is at ${quote.price}, waiting for ${threshold}"
    return AlertCheckResDTO(
        symbol=quote.symbol,
        price=quote.price,
        threshold=threshold,
        condition=condition,
        triggered=triggered,
        message=message,
        timestamp=utcnow(),
    )
