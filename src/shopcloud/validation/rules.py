"""Field and section rules for payload validation.

Each function is pure: it inspects one record and returns the ordered list
of ``{section_key: message}`` error records it produced. The top-level
:class:`~shopcloud.validation.validator.PayloadValidator` concatenates them
in a fixed order.
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence

ErrorRecord = dict[str, str]

COUNTRIES: tuple[str, ...] = ("CAN", "USA")

_EMPTY: Mapping[str, Any] = {}


def as_record(data: Any) -> Mapping[str, Any]:
    """Return *data* if it is a mapping, else an empty record."""
    if isinstance(data, Mapping):
        return data
    return _EMPTY


def is_present(value: Any) -> bool:
    """Return True if a section value counts as supplied.

    Mappings and sequence containers count even when empty so that
    ``{"user_data": {}}`` or ``{"user_data": []}`` is validated (and
    reported on) rather than ignored.
    """
    return isinstance(value, (Mapping, list, tuple)) or bool(value)


# ------------------------------------------------------------------
# Field rules
# ------------------------------------------------------------------


def validate_presence(section: str, data: Mapping[str, Any], field: str) -> list[ErrorRecord]:
    if not data.get(field):
        return [{section: f"{field} missing."}]
    return []


def validate_inclusion(
    section: str,
    allowed: Sequence[str],
    data: Mapping[str, Any],
    field: str,
) -> list[ErrorRecord]:
    """Check that ``data[field]`` is one of *allowed*.

    A missing value fails with the same "must be one of" message.
    """
    if data.get(field) not in allowed:
        return [{section: f"{field} must be one of '{', '.join(allowed)}'."}]
    return []


# ------------------------------------------------------------------
# Section rules
# ------------------------------------------------------------------


def validate_person_data(
    section: str,
    data: Any,
    countries: Sequence[str] = COUNTRIES,
) -> list[ErrorRecord]:
    """Validate a user or admin contact: id, name, email, country."""
    record = as_record(data)
    errors: list[ErrorRecord] = []
    errors += validate_presence(section, record, "id")
    errors += validate_presence(section, record, "name")
    errors += validate_presence(section, record, "email")
    errors += validate_inclusion(section, countries, record, "country")
    return errors


def validate_campaign_data(
    section: str,
    data: Any,
    countries: Sequence[str] = COUNTRIES,
) -> list[ErrorRecord]:
    """Validate a campaign and then its admin under ``campaign_admin_data``.

    Missing admin data is validated as an empty record, so an absent admin
    yields four errors of its own.
    """
    record = as_record(data)
    errors: list[ErrorRecord] = []
    errors += validate_presence(section, record, "id")
    errors += validate_presence(section, record, "name")
    errors += validate_presence(section, record, "category")
    errors += validate_inclusion(section, countries, record, "country")
    errors += validate_person_data(
        "campaign_admin_data", record.get("admin_data") or {}, countries
    )
    return errors


def validate_group_data(data: Any) -> list[ErrorRecord]:
    return validate_presence("group_data", as_record(data), "name")


def validate_organization_data(
    section: str,
    data: Any,
    countries: Sequence[str] = COUNTRIES,
) -> list[ErrorRecord]:
    """Validate an organization and its admin under ``organization_admin_data``."""
    record = as_record(data)
    errors: list[ErrorRecord] = []
    errors += validate_presence(section, record, "id")
    errors += validate_presence(section, record, "name")
    errors += validate_person_data(
        "organization_admin_data", record.get("admin_data") or {}, countries
    )
    return errors
