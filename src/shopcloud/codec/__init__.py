"""codec — symmetric key derivation and compact JWE encryption.

Public API
----------
``TokenCodec``
    Encrypts payload mappings to compact JWE strings and decrypts them.
``normalize_secret``
    Strips the ``sk_`` prefix from a shop secret.
``derive_key``
    Turns a shop secret into 16 bytes of AES-128 key material.
"""
from __future__ import annotations

from shopcloud.codec.jwe import CONTENT_ENCRYPTION, KEY_ALGORITHM, TokenCodec
from shopcloud.codec.keys import KEY_LENGTH, SECRET_PREFIX, derive_key, normalize_secret

__all__ = [
    "CONTENT_ENCRYPTION",
    "KEY_ALGORITHM",
    "KEY_LENGTH",
    "SECRET_PREFIX",
    "TokenCodec",
    "derive_key",
    "normalize_secret",
]
