"""ShopCloudConfig — settings needed to build a ShopCloud instance.

Settings can be passed explicitly or read from the environment::

    SHOPCLOUD_SHOP_ID=A2DE537C
    SHOPCLOUD_SECRET=sk_61c394cf3346077b
    SHOPCLOUD_AUDIT_LOG=/var/log/shopcloud/audit.jsonl   # optional
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

from shopcloud.validation.rules import COUNTRIES

ENV_SHOP_ID: str = "SHOPCLOUD_SHOP_ID"
ENV_SECRET: str = "SHOPCLOUD_SECRET"
ENV_AUDIT_LOG: str = "SHOPCLOUD_AUDIT_LOG"


class ShopCloudConfig(BaseModel):
    """Configuration for a single shop.

    Parameters
    ----------
    shop_id:
        Identifier appended to every token as ``@<shop_id>``.
    secret:
        Shop secret (``sk_`` prefix optional). Masked in ``repr``.
    countries:
        Country codes accepted for ``country`` fields.
    audit_log:
        Optional JSONL file receiving token audit events.
    """

    shop_id: str
    secret: SecretStr
    countries: tuple[str, ...] = Field(default=COUNTRIES, min_length=1)
    audit_log: Optional[Path] = None

    @field_validator("shop_id")
    @classmethod
    def _check_shop_id(cls, value: str) -> str:
        if not value:
            raise ValueError("shop_id must not be empty")
        if "@" in value:
            raise ValueError("shop_id must not contain '@'")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ShopCloudConfig":
        """Build a config from ``SHOPCLOUD_*`` environment variables.

        Raises
        ------
        pydantic.ValidationError
            If a required variable is missing or invalid.
        """
        env = os.environ if environ is None else environ
        data: dict[str, object] = {
            "shop_id": env.get(ENV_SHOP_ID),
            "secret": env.get(ENV_SECRET),
        }
        if env.get(ENV_AUDIT_LOG):
            data["audit_log"] = env[ENV_AUDIT_LOG]
        return cls.model_validate(data)
