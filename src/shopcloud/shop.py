"""ShopCloud — issue and read shop-bound encrypted identity tokens.

Token format
------------
::

    <compact JWE>@<shop_id>

The JWE part is produced by :class:`~shopcloud.codec.TokenCodec`. The
``@<shop_id>`` suffix lets the receiving platform route the token to the
right shop secret; :meth:`ShopCloud.read_token` refuses tokens whose suffix
does not match the configured shop.

Thread safety
-------------
:meth:`ShopCloud.valid_identified` and :meth:`ShopCloud.identified_token`
store the errors of the latest validation on the instance for
:meth:`ShopCloud.get_errors`. An instance is therefore not safe for
concurrent validation calls. Use :meth:`ShopCloud.validate`, which returns
the errors with the result, when sharing an instance between threads.
"""
from __future__ import annotations

import datetime
import logging
from typing import Any, Mapping, Sequence

from shopcloud.audit import TokenAuditLogger
from shopcloud.codec import TokenCodec
from shopcloud.config import ShopCloudConfig
from shopcloud.errors import (
    ConfigurationError,
    DecryptionError,
    StructuralError,
    TokenFormatError,
    TokenMismatchError,
    ValidationError,
)
from shopcloud.payload import as_wire
from shopcloud.validation import COUNTRIES, ErrorRecord, PayloadValidator, ValidationResult

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR: str = "@"
PARTNER_TOKEN_TYPE: str = "partner"
PARTNER_TOKEN_TTL: int = 3600  # seconds


class ShopCloud:
    """Token issuer and reader bound to one shop.

    Parameters
    ----------
    shop_id:
        The shop identifier appended to every token. Must be non-empty and
        must not contain ``@``.
    secret:
        The shop secret, with or without its ``sk_`` prefix.
    countries:
        Country codes accepted for ``country`` fields.
    audit_logger:
        Optional :class:`~shopcloud.audit.TokenAuditLogger` receiving an
        event for every issued, read, or rejected token.

    Examples
    --------
    >>> shop = ShopCloud("A2DE537C", "sk_61c394cf3346077b")
    >>> token = shop.get_partner_token()
    >>> token.endswith("@A2DE537C")
    True
    >>> shop.read_token(token)["type"]
    'partner'
    """

    def __init__(
        self,
        shop_id: str,
        secret: str,
        *,
        countries: Sequence[str] = COUNTRIES,
        audit_logger: TokenAuditLogger | None = None,
    ) -> None:
        if not isinstance(shop_id, str) or not shop_id:
            raise ConfigurationError("Shop identifier must be a non-empty string")
        if TOKEN_SEPARATOR in shop_id:
            raise ConfigurationError(
                f"Shop identifier must not contain {TOKEN_SEPARATOR!r}"
            )

        self._shop_id = shop_id
        self._codec = TokenCodec(secret)
        self._validator = PayloadValidator(countries)
        self._audit = audit_logger
        self._errors: list[ErrorRecord] = []

    @classmethod
    def from_config(cls, config: ShopCloudConfig) -> "ShopCloud":
        """Build an instance from a :class:`~shopcloud.config.ShopCloudConfig`."""
        audit_logger = (
            TokenAuditLogger(log_path=config.audit_log)
            if config.audit_log is not None
            else None
        )
        return cls(
            config.shop_id,
            config.secret.get_secret_value(),
            countries=config.countries,
            audit_logger=audit_logger,
        )

    @property
    def shop_id(self) -> str:
        return self._shop_id

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, payload: Any) -> ValidationResult:
        """Validate *payload* without touching the instance's error state."""
        return self._validator.validate(payload)

    def valid_identified(self, payload: Any) -> bool:
        """Validate *payload* and remember its errors for :meth:`get_errors`."""
        result = self.validate(payload)
        self._errors = list(result.errors)
        return result.valid

    def get_errors(self) -> list[ErrorRecord]:
        """Return the error records of the most recent validation."""
        return [dict(record) for record in self._errors]

    # ------------------------------------------------------------------
    # Issue
    # ------------------------------------------------------------------

    def identified_token(self, payload: Any) -> str:
        """Validate *payload* and return a shop-bound token for it.

        Parameters
        ----------
        payload:
            A :class:`~shopcloud.payload.Payload` record or plain mapping.

        Returns
        -------
        str
            ``<compact JWE>@<shop_id>``.

        Raises
        ------
        StructuralError
            If *payload* is not a mapping.
        ValidationError
            If any field rule fails. ``exc.errors`` holds the records, which
            are also available from :meth:`get_errors`.
        """
        result = self.validate(payload)
        self._errors = list(result.errors)
        if not result.valid:
            errors = self.get_errors()
            if self._audit is not None:
                self._audit.log_payload_rejected(self._shop_id, errors)
            logger.debug(
                "Refusing to issue token for shop %s: %d validation error(s)",
                self._shop_id,
                len(errors),
            )
            if result.is_structural:
                raise StructuralError(errors)
            raise ValidationError(errors)

        token = self._bind(self._codec.encrypt(as_wire(payload)))
        if self._audit is not None:
            self._audit.log_issued(self._shop_id)
        logger.info("Issued identified token for shop %s", self._shop_id)
        return token

    def get_partner_token(self) -> str:
        """Return a partner token expiring :data:`PARTNER_TOKEN_TTL` seconds from now.

        The payload is ``{"type": "partner", "expires": <unix seconds>}``.
        It is system-generated, so it skips payload validation.
        """
        expires = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
            seconds=PARTNER_TOKEN_TTL
        )
        payload = {"type": PARTNER_TOKEN_TYPE, "expires": int(expires.timestamp())}

        token = self._bind(self._codec.encrypt(payload))
        if self._audit is not None:
            self._audit.log_issued(self._shop_id, partner=True, expires=payload["expires"])
        logger.info("Issued partner token for shop %s", self._shop_id)
        return token

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_token(self, token: str) -> dict[str, Any]:
        """Verify the shop suffix of *token* and return its decrypted payload.

        The ``expires`` field is not enforced here; use :func:`is_expired`.

        Raises
        ------
        TokenFormatError
            If the token is not of the form ``<ciphertext>@<shop_id>``.
        TokenMismatchError
            If the token was issued for another shop.
        DecryptionError
            If the ciphertext was tampered with or encrypted with another key.
        """
        try:
            ciphertext = self._unbind(token)
            payload = self._codec.decrypt(ciphertext)
        except (TokenFormatError, TokenMismatchError, DecryptionError) as exc:
            if self._audit is not None:
                self._audit.log_read(self._shop_id, success=False, reason=type(exc).__name__)
            logger.warning("Rejected token for shop %s: %s", self._shop_id, exc)
            raise

        if self._audit is not None:
            self._audit.log_read(self._shop_id, success=True)
        return payload

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bind(self, ciphertext: str) -> str:
        return f"{ciphertext}{TOKEN_SEPARATOR}{self._shop_id}"

    def _unbind(self, token: str) -> str:
        if not isinstance(token, str):
            raise TokenFormatError(f"expected a string, got {type(token).__name__}")

        ciphertext, separator, shop_id = token.partition(TOKEN_SEPARATOR)
        if not separator:
            raise TokenFormatError(f"missing {TOKEN_SEPARATOR!r} separator")
        if not ciphertext:
            raise TokenFormatError("empty ciphertext segment")
        if shop_id != self._shop_id:
            raise TokenMismatchError(expected=self._shop_id, actual=shop_id)
        return ciphertext

    def __repr__(self) -> str:
        return f"ShopCloud(shop_id={self._shop_id!r})"


def split_token(token: str) -> tuple[str, str]:
    """Split a token into ``(ciphertext, shop_id)`` without verifying either.

    Raises
    ------
    TokenFormatError
        If the separator is missing or a segment is empty.
    """
    ciphertext, separator, shop_id = token.partition(TOKEN_SEPARATOR)
    if not separator or not ciphertext or not shop_id:
        raise TokenFormatError(
            f"expected '<ciphertext>{TOKEN_SEPARATOR}<shop_id>'"
        )
    return ciphertext, shop_id


def is_expired(payload: Mapping[str, Any], now: datetime.datetime | None = None) -> bool:
    """Return True if *payload* carries an ``expires`` time that has passed.

    :meth:`ShopCloud.read_token` returns expired payloads unchanged; callers
    that rely on partner-token expiry must check it with this function.
    Payloads without ``expires``, or whose ``expires`` is not a number,
    never expire.
    """
    expires = payload.get("expires")
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        return False
    current = now or datetime.datetime.now(datetime.timezone.utc)
    return current.timestamp() >= float(expires)
