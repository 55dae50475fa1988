"""
Ledger engine: turns cash into recorded gold purchases.

A purchase happens in two steps:
1. quote() does arithmetic and signs the result, no I/O.
   Safe to call and discard.
2. commit() checks the signature, then writes the transaction
   row and bumps the account's totals inside the caller's
   database transaction.

The engine never reads the account's totals to write them
back. Totals move only through AccountDirectory's atomic
increment, so concurrent purchases on one account all land.
"""

import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from gold_savings.config import get_settings
from gold_savings.errors import (
    InvalidAmountError,
    PartialCommitError,
    PriceUnavailableError,
    StaleQuoteError,
    UnavailableError,
    ValidationError,
)
from gold_savings.models.transaction import Transaction
from gold_savings.schemas.ledger import Quote
from gold_savings.schemas.price import PriceSnapshot
from gold_savings.services.account_directory import AccountDirectory

log = logging.getLogger("gold_savings.ledger")

GRAMS_PRECISION = Decimal("0.0001")
AMOUNT_PRECISION = Decimal("0.0001")


def parse_cash_amount(value) -> Decimal:
    """
    Coerce user input to a positive, finite Decimal at the
    4-place scale amounts are stored with.

    Floats go through str() so 0.1 stays 0.1 rather than its
    binary approximation.
    """
    if isinstance(value, bool):
        raise InvalidAmountError("Please enter a valid amount")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError("Please enter a valid amount") from e
    if not amount.is_finite():
        raise InvalidAmountError("Please enter a valid amount")
    amount = amount.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidAmountError("Please enter a valid amount")
    return amount


def grams_for(cash_amount: Decimal, price_per_gram: Decimal) -> Decimal:
    """Weight bought for cash_amount, rounded half-up to 4 places."""
    return (cash_amount / price_per_gram).quantize(
        GRAMS_PRECISION, rounding=ROUND_HALF_UP
    )


def _canonical_decimal(value: Decimal) -> str:
    # "6000", "6000.00" and "6E+3" all sign the same
    return format(value.normalize(), "f")


def _canonical_time(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat()


def sign_quote(
    secret: str,
    grams: Decimal,
    cash_amount: Decimal,
    price_per_gram: Decimal,
    snapshot_time: datetime,
) -> str:
    """HMAC-SHA256 over a quote's terms, hex encoded."""
    message = "|".join([
        _canonical_decimal(grams),
        _canonical_decimal(cash_amount),
        _canonical_decimal(price_per_gram),
        _canonical_time(snapshot_time),
    ])
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class LedgerEngine:
    """
    All purchases pass through this service.

    Like the directory, it takes a database session and leaves
    the commit to the caller. If commit() raises, the caller
    must roll back.

    Quotes are signed with quote_secret (QUOTE_SECRET by
    default), and commit() only accepts quotes signed with the
    same secret.
    """

    def __init__(
        self,
        db: Session,
        quote_max_age_seconds: int = 0,
        quote_secret: str | None = None,
    ):
        self.db = db
        self.directory = AccountDirectory(db)
        self.quote_max_age_seconds = quote_max_age_seconds
        self.quote_secret = quote_secret or get_settings().QUOTE_SECRET

    def quote(self, cash_amount, snapshot: PriceSnapshot | None) -> Quote:
        """
        Compute how much gold cash_amount buys at the snapshot price.

        Raises InvalidAmountError for anything that is not a
        positive finite number, and PriceUnavailableError when
        there is no usable gold price.
        """
        amount = parse_cash_amount(cash_amount)
        if snapshot is None or snapshot.gold_price <= 0:
            raise PriceUnavailableError("Gold price is not available")

        grams = grams_for(amount, snapshot.gold_price)
        if grams <= 0:
            raise InvalidAmountError(
                f"Amount {amount} buys less than {GRAMS_PRECISION}g"
            )

        return Quote(
            grams=grams,
            cash_amount=amount,
            price_per_gram=snapshot.gold_price,
            snapshot_time=snapshot.as_of,
            signature=sign_quote(
                self.quote_secret, grams, amount,
                snapshot.gold_price, snapshot.as_of,
            ),
        )

    def _check_quote(self, quote: Quote) -> None:
        expected = sign_quote(
            self.quote_secret, quote.grams, quote.cash_amount,
            quote.price_per_gram, quote.snapshot_time,
        )
        if not quote.signature or not hmac.compare_digest(
            expected.encode("utf-8"), quote.signature.encode("utf-8")
        ):
            log.warning(
                "quote_rejected grams=%s amount=%s price=%s",
                quote.grams, quote.cash_amount, quote.price_per_gram,
            )
            raise ValidationError("Quote signature is invalid; request a new quote")

        if self.quote_max_age_seconds > 0:
            taken = quote.snapshot_time
            if taken.tzinfo is not None:
                taken = taken.astimezone(timezone.utc).replace(tzinfo=None)
            age = datetime.utcnow() - taken
            if age > timedelta(seconds=self.quote_max_age_seconds):
                raise StaleQuoteError(
                    f"Quote is {int(age.total_seconds())}s old; "
                    f"limit is {self.quote_max_age_seconds}s"
                )

    def commit(self, account_id: int, quote: Quote) -> Transaction:
        """
        Post a quoted purchase against an account.

        Inserts the transaction, then increments the account's
        totals by the same grams and cash in one UPDATE. Both
        writes share the caller's database transaction, so they
        become visible together on db.commit() or not at all.

        The price is the one captured by the quote, not a fresh
        read of the feed.
        """
        self._check_quote(quote)

        account = self.directory.get_account(account_id)
        if not account.is_active:
            raise ValidationError(f"Account {account_id} is not active")

        txn = Transaction(
            user_id=account.id,
            bookid=account.bookid,
            user_name=account.name,
            grams_purchased=quote.grams,
            price_per_gram=quote.price_per_gram,
            total_amount=quote.cash_amount,
            transaction_date=datetime.utcnow(),
        )
        self.db.add(txn)
        try:
            self.db.flush()
        except OperationalError as e:
            raise UnavailableError("Transaction store unreachable") from e

        try:
            updated = self.directory.increment_aggregates(
                account.id, quote.grams, quote.cash_amount
            )
        except SQLAlchemyError as e:
            log.error(
                "purchase_partial account=%s txn=%s error=%s",
                account.id, txn.id, e,
            )
            raise PartialCommitError(
                f"Totals update failed for account {account.id}"
            ) from e

        if updated != 1:
            # Account vanished between the lookup and the increment
            log.error(
                "purchase_partial account=%s txn=%s rows=%s",
                account.id, txn.id, updated,
            )
            raise PartialCommitError(
                f"Totals update matched {updated} rows for account {account.id}"
            )

        # Our in-memory copy predates the increment
        self.db.expire(account)

        log.info(
            "purchase account=%s bookid=%s grams=%s price=%s amount=%s txn=%s",
            account_id, txn.bookid, quote.grams, quote.price_per_gram,
            quote.cash_amount, txn.id,
        )
        return txn
