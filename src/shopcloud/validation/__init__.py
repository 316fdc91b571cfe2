"""validation — payload schema and business-rule checks.

Public API
----------
``PayloadValidator``
    Validates a payload and returns a :class:`ValidationResult`.
``ValidationResult``
    Ordered error records plus a ``valid`` flag; truthy when valid.
``validate_payload``
    Convenience function using the default country set.
``COUNTRIES``
    Country codes accepted by default.
"""
from __future__ import annotations

from shopcloud.validation.rules import COUNTRIES, ErrorRecord
from shopcloud.validation.validator import (
    PayloadValidator,
    ValidationResult,
    validate_payload,
)

__all__ = [
    "COUNTRIES",
    "ErrorRecord",
    "PayloadValidator",
    "ValidationResult",
    "validate_payload",
]
