"""Typed payload records exchanged inside shopcloud tokens.

Every field is optional so that incomplete records can be built, passed to
the validator, and reported on. Validation rules live in
:mod:`shopcloud.validation`; these models only describe shape.

Wire format
-----------
Records serialize to JSON objects with snake_case keys::

    {
      "user_data": {"id": "42", "name": "...", "email": "...", "country": "CAN"},
      "campaign_data": {"id": "7", "name": "...", "category": "Running",
                        "country": "CAN", "admin_data": {...}},
      "group_data": {"name": "..."}
    }
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

Identifier = Union[str, int]


class _Record(BaseModel):
    """Common configuration: keep unknown keys so they round-trip."""

    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a wire mapping, dropping unset fields."""
        return self.model_dump(exclude_none=True)


class PersonData(_Record):
    """A user or an admin contact."""

    id: Optional[Identifier] = None
    name: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None


class CampaignData(_Record):
    """A fundraising campaign and its administrator."""

    id: Optional[Identifier] = None
    name: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None
    admin_data: Optional[PersonData] = None


class GroupData(_Record):
    """A group (team, division) inside a campaign."""

    name: Optional[str] = None
    player_number: Optional[Identifier] = None


class OrganizationData(_Record):
    """An organization and its administrator."""

    id: Optional[Identifier] = None
    name: Optional[str] = None
    admin_data: Optional[PersonData] = None


class Payload(_Record):
    """Envelope carried by a token.

    Parameters
    ----------
    user_data, campaign_data, group_data, organization_data:
        Optional sub-records. At least one of ``user_data`` or
        ``campaign_data`` is required for the payload to validate.
    type:
        Free-form tag, e.g. ``"partner"`` for partner tokens.
    expires:
        Unix timestamp (seconds) after which the token should be considered
        stale. Advisory only; see :func:`shopcloud.shop.is_expired`.
    """

    user_data: Optional[PersonData] = None
    campaign_data: Optional[CampaignData] = None
    group_data: Optional[GroupData] = None
    organization_data: Optional[OrganizationData] = None
    type: Optional[str] = None
    expires: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Payload":
        """Build a Payload from a wire mapping (e.g. a decrypted token)."""
        return cls.model_validate(dict(data))


def as_wire(payload: Any) -> Any:
    """Return *payload* as a wire mapping when it is a record.

    Plain mappings and any other value are returned unchanged so the
    validator can report on them.
    """
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_none=True)
    return payload
