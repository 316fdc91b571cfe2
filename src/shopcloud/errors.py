"""Exception hierarchy for shopcloud.

Every error raised by the public API derives from :class:`ShopCloudError`
so callers can catch the whole family with a single ``except`` clause.
"""
from __future__ import annotations


class ShopCloudError(Exception):
    """Base class for all shopcloud errors."""


class ConfigurationError(ShopCloudError):
    """Raised when a shop identifier or secret cannot be used."""


# ---------------------------------------------------------------------------
# Payload validation
# ---------------------------------------------------------------------------


class ValidationError(ShopCloudError):
    """Raised when a payload fails validation at token issuance.

    Parameters
    ----------
    errors:
        Ordered list of single-key ``{section_key: message}`` records.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid payload: {len(self.errors)} error(s)")


class StructuralError(ValidationError):
    """Raised when the payload is not a mapping at all."""


# ---------------------------------------------------------------------------
# Token handling
# ---------------------------------------------------------------------------


class InvalidTokenError(ShopCloudError):
    """Base class for tokens that cannot be bound to this shop."""


class TokenFormatError(InvalidTokenError):
    """Raised when the token is not of the form ``<ciphertext>@<shop_id>``."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid token: {reason}")


class TokenMismatchError(InvalidTokenError):
    """Raised when the token's shop identifier differs from the configured one."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid token: issued for shop {actual!r}, expected {expected!r}"
        )


class EncryptionError(ShopCloudError):
    """Raised when a payload cannot be serialized or encrypted."""


class DecryptionError(ShopCloudError):
    """Raised when a ciphertext cannot be parsed, authenticated, or decoded."""
