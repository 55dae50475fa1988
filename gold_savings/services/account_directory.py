"""
Account directory, the canonical accessor for member accounts.

Every read and write of the users table goes through here,
including the atomic aggregate increment the ledger engine
uses. Like the other services, it takes a database session
and flushes; the caller decides when to commit.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from gold_savings.errors import (
    DuplicateBookIdError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from gold_savings.models.account import Account, MAX_MONTHS_PAID
from gold_savings.models.transaction import Transaction
from gold_savings.schemas.account import AccountCreate

log = logging.getLogger("gold_savings.accounts")


class AccountDirectory:

    def __init__(self, db: Session):
        self.db = db

    def list_accounts(self, include_admins: bool = True) -> list[Account]:
        """Return all accounts ordered by id."""
        stmt = select(Account).order_by(Account.id)
        if not include_admins:
            stmt = stmt.where(Account.is_admin.is_(False))
        try:
            accounts = self.db.execute(stmt).scalars().all()
        except OperationalError as e:
            raise UnavailableError("Account store unreachable") from e
        return list(accounts)

    def create_account(self, request: AccountCreate) -> Account:
        """
        Register a new member.

        name, bookid and phone must be non-empty. Book ids are
        unique; the unique constraint backs up the explicit check
        when two creates race.
        """
        name = request.name.strip()
        bookid = request.bookid.strip()
        phone = request.phone.strip()
        missing = [
            field for field, value in
            (("name", name), ("bookid", bookid), ("phone", phone))
            if not value
        ]
        if missing:
            raise ValidationError(
                f"Required fields missing: {', '.join(missing)}"
            )

        try:
            existing = self.db.execute(
                select(Account).where(Account.bookid == bookid)
            ).scalar_one_or_none()
        except OperationalError as e:
            raise UnavailableError("Account store unreachable") from e
        if existing:
            raise DuplicateBookIdError(
                f"Account with book id '{bookid}' already exists"
            )

        email = request.email.strip() if request.email else None
        account = Account(
            name=name,
            bookid=bookid,
            phone=phone,
            email=email or None,
            is_admin=request.is_admin,
            is_active=True,
            total_grams=Decimal("0"),
            total_amount_spent=Decimal("0"),
            months_paid=0,
        )
        self.db.add(account)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise DuplicateBookIdError(
                f"Account with book id '{bookid}' already exists"
            ) from e
        except OperationalError as e:
            raise UnavailableError("Account store unreachable") from e

        log.info("account_created id=%s bookid=%s", account.id, bookid)
        return account

    def delete_account(self, account_id: int) -> None:
        """
        Hard-delete an account.

        Transactions are left exactly as they were; the purchase
        history is append-only and outlives the account.
        """
        account = self.get_account(account_id)
        self.db.delete(account)
        self.db.flush()
        log.info("account_deleted id=%s bookid=%s", account_id, account.bookid)

    def get_account(self, account_id: int, refresh: bool = False) -> Account:
        """
        Get an account by id.

        With refresh=True the row is re-read from the database
        even if this session already holds a copy of it.
        """
        try:
            account = self.db.get(
                Account, account_id, populate_existing=refresh
            )
        except OperationalError as e:
            raise UnavailableError("Account store unreachable") from e
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def get_account_by_bookid(self, bookid: str) -> Account:
        """Exact, case-sensitive lookup by book id."""
        try:
            account = self.db.execute(
                select(Account).where(Account.bookid == bookid)
            ).scalar_one_or_none()
        except OperationalError as e:
            raise UnavailableError("Account store unreachable") from e
        if not account:
            raise NotFoundError(f"Account with book id '{bookid}' not found")
        return account

    def get_transactions(self, account_id: int) -> list[Transaction]:
        """
        Return an account's purchases, newest first.

        Does not require the account to still exist.
        """
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == account_id)
            .order_by(
                Transaction.transaction_date.desc(),
                Transaction.id.desc(),
            )
        )
        try:
            transactions = self.db.execute(stmt).scalars().all()
        except OperationalError as e:
            raise UnavailableError("Transaction store unreachable") from e
        return list(transactions)

    def increment_aggregates(
        self, account_id: int, grams: Decimal, amount: Decimal
    ) -> int:
        """
        Add to an account's running totals in a single UPDATE.

        The new value is computed by the database from the
        current row, so concurrent purchases against the same
        account cannot overwrite each other. Returns the number
        of rows updated (0 if the account no longer exists).
        """
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(
                total_grams=Account.total_grams + grams,
                total_amount_spent=Account.total_amount_spent + amount,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def set_active(self, account_id: int, is_active: bool) -> Account:
        """Activate or deactivate an account. Inactive accounts cannot sign in or buy."""
        account = self.get_account(account_id)
        account.is_active = is_active
        self.db.flush()
        log.info("account_status id=%s is_active=%s", account_id, is_active)
        return account

    def set_months_paid(self, account_id: int, months_paid: int) -> Account:
        """Record how many scheme instalments the member has paid."""
        if not 0 <= months_paid <= MAX_MONTHS_PAID:
            raise ValidationError(
                f"months_paid must be between 0 and {MAX_MONTHS_PAID}"
            )
        account = self.get_account(account_id)
        account.months_paid = months_paid
        self.db.flush()
        return account
