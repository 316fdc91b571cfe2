"""Secret normalization and key derivation for the token codec.

Shop secrets are handed out as ``sk_<hex>`` strings. The ``sk_`` prefix is
cosmetic: the remaining characters, UTF-8 encoded, are the raw AES-128
content-encryption key used directly (JWE ``alg=dir``).
"""
from __future__ import annotations

from shopcloud.errors import ConfigurationError

SECRET_PREFIX: str = "sk_"

# A128GCM requires a 128-bit key.
KEY_LENGTH: int = 16


def normalize_secret(secret: str) -> str:
    """Strip one leading ``sk_`` prefix from *secret*, if present.

    >>> normalize_secret("sk_61c394cf3346077b")
    '61c394cf3346077b'
    >>> normalize_secret("61c394cf3346077b")
    '61c394cf3346077b'
    """
    if secret.startswith(SECRET_PREFIX):
        return secret[len(SECRET_PREFIX):]
    return secret


def derive_key(secret: str) -> bytes:
    """Turn a shop secret into raw key bytes.

    Parameters
    ----------
    secret:
        The shop secret, with or without the ``sk_`` prefix.

    Returns
    -------
    bytes
        16 bytes of key material.

    Raises
    ------
    ConfigurationError
        If the normalized secret does not encode to exactly 16 bytes.
    """
    if not isinstance(secret, str):
        raise ConfigurationError(
            f"Secret must be a string, got {type(secret).__name__}"
        )
    key = normalize_secret(secret).encode("utf-8")
    if len(key) != KEY_LENGTH:
        raise ConfigurationError(
            f"Secret must be {KEY_LENGTH} bytes after removing the "
            f"'{SECRET_PREFIX}' prefix, got {len(key)}"
        )
    return key
