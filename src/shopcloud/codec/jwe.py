"""TokenCodec — compact JWE encryption of token payloads.

Payloads are serialized to compact JSON and encrypted with a key used
directly as the content-encryption key:

- protected header: ``{"alg": "dir", "enc": "A128GCM"}``
- compact form: ``header..iv.ciphertext.tag`` (base64url segments; the
  encrypted-key segment is empty for ``dir``)

The AEAD work is delegated to :mod:`jose.jwe` (python-jose with the
``cryptography`` backend). Nonces are random, so encrypting the same
payload twice yields different tokens.
"""
from __future__ import annotations

import json
from typing import Any, Mapping

from jose import jwe
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError

from shopcloud.codec.keys import derive_key
from shopcloud.errors import DecryptionError, EncryptionError

KEY_ALGORITHM: str = ALGORITHMS.DIR
CONTENT_ENCRYPTION: str = ALGORITHMS.A128GCM


class TokenCodec:
    """Encrypt payloads to compact JWE strings and back.

    Parameters
    ----------
    secret:
        Shop secret; see :func:`shopcloud.codec.keys.derive_key`.

    Examples
    --------
    >>> codec = TokenCodec("sk_61c394cf3346077b")
    >>> codec.decrypt(codec.encrypt({"type": "partner"}))
    {'type': 'partner'}
    """

    def __init__(self, secret: str) -> None:
        self._key: bytes = derive_key(secret)

    def encrypt(self, payload: Mapping[str, Any]) -> str:
        """Encrypt *payload* and return the compact JWE string.

        Raises
        ------
        EncryptionError
            If the payload is not JSON serializable or encryption fails.
        """
        try:
            plaintext = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncryptionError(f"Payload is not JSON serializable: {exc}") from exc

        try:
            token = jwe.encrypt(
                plaintext,
                self._key,
                algorithm=KEY_ALGORITHM,
                encryption=CONTENT_ENCRYPTION,
            )
        except JOSEError as exc:
            raise EncryptionError(f"Could not encrypt payload: {exc}") from exc

        return token.decode("ascii")

    def decrypt(self, ciphertext: str) -> dict[str, Any]:
        """Decrypt a compact JWE string produced by :meth:`encrypt`.

        Raises
        ------
        DecryptionError
            If the ciphertext is malformed, was encrypted with another key,
            fails authentication, or does not hold a JSON object.
        """
        try:
            plaintext = jwe.decrypt(ciphertext.encode("ascii"), self._key)
        except (JOSEError, UnicodeEncodeError, ValueError) as exc:
            raise DecryptionError(f"Could not decrypt token: {exc}") from exc

        if plaintext is None:
            raise DecryptionError("Could not decrypt token: empty plaintext")

        try:
            payload = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise DecryptionError(f"Could not decode payload: {exc}") from exc

        if not isinstance(payload, dict):
            raise DecryptionError(
                f"Decrypted payload must be a JSON object, got {type(payload).__name__}"
            )
        return payload

    @staticmethod
    def read_header(ciphertext: str) -> dict[str, Any]:
        """Return the protected header without decrypting.

        The header is not authenticated by this call.

        Raises
        ------
        DecryptionError
            If the header segment cannot be parsed.
        """
        try:
            return dict(jwe.get_unverified_header(ciphertext.encode("ascii")))
        except (JOSEError, UnicodeEncodeError, ValueError) as exc:
            raise DecryptionError(f"Could not read token header: {exc}") from exc
