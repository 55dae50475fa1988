"""
Purchase endpoints.

The API layer is thin: it fetches prices, hands them to the
LedgerEngine, and owns the commit/rollback boundary. The
confirmation step between quote and commit belongs to the
client.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gold_savings.api.deps import get_price_oracle, get_session_manager, to_http
from gold_savings.config import get_settings
from gold_savings.errors import SchemeError
from gold_savings.models.base import get_db
from gold_savings.schemas.ledger import (
    PurchaseRequest,
    Quote,
    QuoteRequest,
    TransactionResponse,
)
from gold_savings.services.ledger_engine import LedgerEngine
from gold_savings.services.session_manager import SessionManager

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.post("/quote", response_model=Quote)
def quote_purchase(
    request: QuoteRequest,
    db: Session = Depends(get_db),
    oracle=Depends(get_price_oracle),
):
    """
    How much gold cash_amount buys at the live price. Writes nothing.

    The returned quote is signed; post it back unchanged to buy.
    """
    try:
        snapshot = oracle.get_current_prices()
        return LedgerEngine(db).quote(request.cash_amount, snapshot)
    except SchemeError as e:
        raise to_http(e)


@router.post("", response_model=TransactionResponse, status_code=201)
def commit_purchase(
    request: PurchaseRequest,
    db: Session = Depends(get_db),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Post a confirmed quote.

    When the purchase is for the signed-in account, the
    cached session is refreshed after the commit so the
    totals it reports include this purchase.
    """
    engine = LedgerEngine(
        db, quote_max_age_seconds=get_settings().QUOTE_MAX_AGE_SECONDS
    )
    try:
        txn = engine.commit(request.account_id, request.quote)
        db.commit()
    except SchemeError as e:
        db.rollback()
        raise to_http(e)

    current = session_manager.current
    if current is not None and current.id == request.account_id:
        session_manager.refresh(request.account_id)

    return txn
