"""PayloadValidator — schema and business-rule checks for token payloads.

Checks always run in the same order and never short-circuit, so callers
(and tests) can rely on the position of each error record:

1. the payload is a mapping
2. it carries ``user_data`` or ``campaign_data``
3. ``user_data``
4. ``campaign_data`` followed by ``campaign_admin_data``
5. ``group_data``
6. ``organization_data`` followed by ``organization_admin_data``
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from shopcloud.payload import as_wire
from shopcloud.validation.rules import (
    COUNTRIES,
    ErrorRecord,
    is_present,
    validate_campaign_data,
    validate_group_data,
    validate_organization_data,
    validate_person_data,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one payload.

    Parameters
    ----------
    errors:
        Ordered ``{section_key: message}`` records. Empty when valid.
    """

    errors: list[ErrorRecord] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def is_structural(self) -> bool:
        """True when the payload was not a mapping at all."""
        return any(e.get("payload") == PayloadValidator.NOT_AN_OBJECT for e in self.errors)

    def __bool__(self) -> bool:
        return self.valid


class PayloadValidator:
    """Validate payloads against the record rules.

    Parameters
    ----------
    countries:
        Country codes accepted for ``country`` fields.

    Example
    -------
    ::

        result = PayloadValidator().validate({"user_data": {}})
        assert not result
        assert result.errors[0] == {"user_data": "id missing."}
    """

    NOT_AN_OBJECT = "Payload must be an object"
    MINIMUM_DATA = "At least must contain user_data or campaign_data."

    def __init__(self, countries: Sequence[str] = COUNTRIES) -> None:
        self._countries = tuple(countries)

    @property
    def countries(self) -> tuple[str, ...]:
        return self._countries

    def validate(self, payload: Any) -> ValidationResult:
        """Run every check against *payload* and return the result.

        Parameters
        ----------
        payload:
            A :class:`~shopcloud.payload.Payload` record or a plain mapping.
            Any other value is reported as a structural error.

        Returns
        -------
        ValidationResult
        """
        data = as_wire(payload)
        errors: list[ErrorRecord] = []

        if not isinstance(data, Mapping):
            errors.append({"payload": self.NOT_AN_OBJECT})
            data = {}

        if not (is_present(data.get("user_data")) or is_present(data.get("campaign_data"))):
            errors.append({"payload": self.MINIMUM_DATA})

        if is_present(data.get("user_data")):
            errors += validate_person_data("user_data", data["user_data"], self._countries)

        if is_present(data.get("campaign_data")):
            errors += validate_campaign_data(
                "campaign_data", data["campaign_data"], self._countries
            )

        if is_present(data.get("group_data")):
            errors += validate_group_data(data["group_data"])

        if is_present(data.get("organization_data")):
            errors += validate_organization_data(
                "organization_data", data["organization_data"], self._countries
            )

        logger.debug("Payload validation finished with %d error(s)", len(errors))
        return ValidationResult(errors=errors)


_DEFAULT_VALIDATOR = PayloadValidator()


def validate_payload(payload: Any) -> ValidationResult:
    """Validate *payload* with the default country set."""
    return _DEFAULT_VALIDATOR.validate(payload)
