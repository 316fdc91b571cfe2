"""payload — typed records for the data carried inside a token.

Public API
----------
``Payload``
    Envelope holding user, campaign, group and organization records.
``PersonData``, ``CampaignData``, ``GroupData``, ``OrganizationData``
    The individual sub-records.
"""
from __future__ import annotations

from shopcloud.payload.records import (
    CampaignData,
    GroupData,
    OrganizationData,
    Payload,
    PersonData,
    as_wire,
)

__all__ = [
    "CampaignData",
    "GroupData",
    "OrganizationData",
    "Payload",
    "PersonData",
    "as_wire",
]
