"""
Price endpoints.
"""

from fastapi import APIRouter, Depends, Response

from gold_savings.api.deps import get_price_oracle, to_http
from gold_savings.errors import SchemeError
from gold_savings.schemas.price import PriceSnapshot

router = APIRouter(prefix="/prices", tags=["Prices"])


@router.get(
    "",
    response_model=PriceSnapshot,
    responses={204: {"description": "No prices published yet"}},
)
def get_current_prices(oracle=Depends(get_price_oracle)):
    """
    Current gold and silver price per gram.

    Returns 204 when the feed has not published anything yet
    and 503 when the feed cannot be reached.
    """
    try:
        snapshot = oracle.get_current_prices()
    except SchemeError as e:
        raise to_http(e)
    if snapshot is None:
        return Response(status_code=204)
    return snapshot
