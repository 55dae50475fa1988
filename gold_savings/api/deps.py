"""
Shared API dependencies and error translation.
"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gold_savings.config import get_settings
from gold_savings.errors import (
    DuplicateBookIdError,
    InvalidCredentialError,
    NotFoundError,
    PartialCommitError,
    SchemeError,
    UnavailableError,
    ValidationError,
)
from gold_savings.models.base import get_db
from gold_savings.services.price_oracle import build_price_oracle
from gold_savings.services.session_manager import SessionManager


# Most specific first
STATUS_BY_ERROR: list[tuple[type[SchemeError], int]] = [
    (DuplicateBookIdError, 409),
    (ValidationError, 400),
    (InvalidCredentialError, 401),
    (NotFoundError, 404),
    (UnavailableError, 503),
    (PartialCommitError, 500),
]


def to_http(error: SchemeError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def get_session_manager(request: Request) -> SessionManager:
    """The process-wide session manager created at startup."""
    return request.app.state.session_manager


def get_price_oracle(db: Session = Depends(get_db)):
    return build_price_oracle(get_settings(), db)
