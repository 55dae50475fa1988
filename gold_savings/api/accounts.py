"""
Account administration endpoints.

These are the operations behind the admin users screen.
Access control is left to the client, which only shows
them to accounts with is_admin set.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from gold_savings.api.deps import to_http
from gold_savings.errors import SchemeError
from gold_savings.models.base import get_db
from gold_savings.services.account_directory import AccountDirectory
from gold_savings.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountStatusUpdate,
    MonthsPaidUpdate,
)
from gold_savings.schemas.ledger import TransactionResponse

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    include_admins: bool = False,
    db: Session = Depends(get_db),
):
    """List accounts, members only unless include_admins is set."""
    try:
        return AccountDirectory(db).list_accounts(include_admins=include_admins)
    except SchemeError as e:
        raise to_http(e)


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """Register a new member. Book ids must be unique."""
    directory = AccountDirectory(db)
    try:
        account = directory.create_account(request)
        db.commit()
        return account
    except SchemeError as e:
        db.rollback()
        raise to_http(e)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    try:
        return AccountDirectory(db).get_account(account_id)
    except SchemeError as e:
        raise to_http(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete an account.

    Its purchase history is kept and stays readable through
    the transactions endpoint.
    """
    try:
        AccountDirectory(db).delete_account(account_id)
        db.commit()
    except SchemeError as e:
        db.rollback()
        raise to_http(e)
    return Response(status_code=204)


@router.get(
    "/{account_id}/transactions",
    response_model=list[TransactionResponse],
)
def get_account_transactions(
    account_id: int,
    db: Session = Depends(get_db),
):
    """All purchases for an account, newest first."""
    return AccountDirectory(db).get_transactions(account_id)


@router.patch("/{account_id}/status", response_model=AccountResponse)
def change_account_status(
    account_id: int,
    request: AccountStatusUpdate,
    db: Session = Depends(get_db),
):
    try:
        account = AccountDirectory(db).set_active(account_id, request.is_active)
        db.commit()
        return account
    except SchemeError as e:
        db.rollback()
        raise to_http(e)


@router.patch("/{account_id}/months-paid", response_model=AccountResponse)
def set_months_paid(
    account_id: int,
    request: MonthsPaidUpdate,
    db: Session = Depends(get_db),
):
    try:
        account = AccountDirectory(db).set_months_paid(
            account_id, request.months_paid
        )
        db.commit()
        return account
    except SchemeError as e:
        db.rollback()
        raise to_http(e)
