"""
Error taxonomy for the savings scheme.

Services raise these; the API layer maps them to HTTP status
codes. ValidationError also subclasses ValueError so callers
that only know about ValueError still catch bad input.
"""


class SchemeError(Exception):
    """Base class for all scheme errors."""


class ValidationError(SchemeError, ValueError):
    """Input rejected before any write."""


class InvalidAmountError(ValidationError):
    """Cash amount is non-numeric, not finite, or not positive."""


class DuplicateBookIdError(ValidationError):
    """Another account already uses this book id."""


class StaleQuoteError(ValidationError):
    """Quote is older than the configured maximum age."""


class InvalidCredentialError(SchemeError):
    """Book id unknown or account inactive. Deliberately vague."""


class NotFoundError(SchemeError):
    pass


class UnavailableError(SchemeError):
    """Remote store or price feed could not be reached."""


class PriceUnavailableError(UnavailableError):
    pass


class PartialCommitError(SchemeError):
    """
    One half of a purchase commit failed.

    The unit of work must be rolled back when this is raised,
    so neither the transaction row nor the aggregate update
    becomes visible.
    """
