#!/usr/bin/env python3
"""Example: Quickstart

Issues an identified token for a user, campaign and group, reads it back,
and issues a partner token.

Usage:
    SHOPCLOUD_SHOP_ID=A2DE537C SHOPCLOUD_SECRET=sk_61c394cf3346077b \
        python examples/01_quickstart.py

Requirements:
    pip install shopcloud
"""
from __future__ import annotations

import shopcloud
from shopcloud import ShopCloud, ShopCloudConfig, ValidationError


def main() -> None:
    print(f"shopcloud version: {shopcloud.__version__}")

    shop = ShopCloud.from_config(ShopCloudConfig.from_env())

    user_data = {
        "id": "19850703",
        "name": "Emmett Brown",
        "email": "ebrown@time.com",
        "country": "USA",
    }
    payload = {
        "user_data": user_data,
        "campaign_data": {
            "id": "19551105",
            "name": "The Time Travelers",
            "category": "Events & Trips",
            "country": "USA",
            "admin_data": user_data,
        },
        "group_data": {"name": "Marty McFly"},
    }

    # Step 1: Validate
    print(f"Payload valid: {shop.valid_identified(payload)}")

    # Step 2: Issue and read back
    token = shop.identified_token(payload)
    print(f"Token: {token[:40]}...@{shop.shop_id}")
    print(f"Round trip ok: {shop.read_token(token) == payload}")

    # Step 3: Invalid payloads report every error
    try:
        shop.identified_token({"user_data": {}})
    except ValidationError as exc:
        for record in exc.errors:
            print(f"  {record}")

    # Step 4: Partner token
    partner = shop.read_token(shop.get_partner_token())
    print(f"Partner token type: {partner['type']}, expires: {partner['expires']}")


if __name__ == "__main__":
    main()
