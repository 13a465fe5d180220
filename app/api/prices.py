from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.depends.auth import KeyGate, api_key_dependency
from app.depends.services import get_price_service
from app.models.prices import AssetType, BatchPriceDTO, BatchPriceResDTO, GasPrices, PriceResDTO
from app.services.prices.price_service import PriceService
from app.utils.time import utcnow

router = APIRouter(tags=["prices"])


@router.get("/price/{asset_type}/{symbol}")
async def get_price(
        asset_type: str,
        symbol: str,
        key: Annotated[KeyGate, Depends(api_key_dependency)],
        price_service: Annotated[PriceService, Depends(get_price_service)],
) -> PriceResDTO:
    try:
        asset_type = AssetType(asset_type)
    except ValueError:
        raise HTTPException(status_code=400, detail="Type must be crypto, stock or forex")
    await key.consume()
    quote = await price_service.get_quote(asset_type, symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail="Symbol not found or API error")
    return PriceResDTO(
        type=quote.type,
        symbol=quote.symbol,
        price=quote.price,
        currency=quote.currency,
        timestamp=utcnow(),
    )


@router.post("/price/batch")
async def batch_prices(
        data: BatchPriceDTO,
        key: Annotated[KeyGate, Depends(api_key_dependency)],
        price_service: Annotated[PriceService, Depends(get_price_service)],
) -> BatchPriceResDTO:
    await key.consume()
    results = await price_service.get_batch(data.symbols)
    return BatchPriceResDTO(results=results, timestamp=utcnow())


@router.get("/gas")
async def gas_prices(
        key: Annotated[KeyGate, Depends(api_key_dependency)],
        price_service: Annotated[PriceService, Depends(get_price_service)],
) -> GasPrices:
    await key.consume()
    return await price_service.get_gas_prices()
