"""shopcloud — encrypted, shop-bound identity tokens for partner platforms.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick start
-----------
::

    from shopcloud import ShopCloud

    shop = ShopCloud("A2DE537C", "sk_61c394cf3346077b")
    token = shop.identified_token({"user_data": {...}, "campaign_data": {...}})
    payload = shop.read_token(token)
"""
from __future__ import annotations

__version__: str = "0.1.0"

from shopcloud.audit import AuditEvent, TokenAuditLogger
from shopcloud.codec import TokenCodec, derive_key, normalize_secret
from shopcloud.config import ShopCloudConfig
from shopcloud.errors import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    InvalidTokenError,
    ShopCloudError,
    StructuralError,
    TokenFormatError,
    TokenMismatchError,
    ValidationError,
)
from shopcloud.payload import CampaignData, GroupData, OrganizationData, Payload, PersonData
from shopcloud.shop import PARTNER_TOKEN_TTL, ShopCloud, is_expired, split_token
from shopcloud.validation import COUNTRIES, PayloadValidator, ValidationResult, validate_payload

__all__ = [
    "__version__",
    # facade
    "PARTNER_TOKEN_TTL",
    "ShopCloud",
    "is_expired",
    "split_token",
    # records
    "CampaignData",
    "GroupData",
    "OrganizationData",
    "Payload",
    "PersonData",
    # validation
    "COUNTRIES",
    "PayloadValidator",
    "ValidationResult",
    "validate_payload",
    # codec
    "TokenCodec",
    "derive_key",
    "normalize_secret",
    # config / audit
    "AuditEvent",
    "ShopCloudConfig",
    "TokenAuditLogger",
    # errors
    "ConfigurationError",
    "DecryptionError",
    "EncryptionError",
    "InvalidTokenError",
    "ShopCloudError",
    "StructuralError",
    "TokenFormatError",
    "TokenMismatchError",
    "ValidationError",
]
