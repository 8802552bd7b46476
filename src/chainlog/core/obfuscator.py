"""
Reversible obfuscation of values written to logs.

Values are encrypted with AES-GCM and embedded as `!ENC!:{<base64>}` so an
operator holding the key can recover them from log lines later.
"""

import base64
import os
import re
from typing import Union

from .exceptions import ConfigurationError, ObfuscationError

MARKER = "!ENC!:"
NONCE_SIZE = 12

_ENCRYPTED = re.compile(r"(.*?)!ENC!:\{([A-Za-z0-9_\-=]*)\}(.*)", re.DOTALL)


def _aesgcm():
    try:
        from cryptography.hazmat.primitives.ciphers.aead import AESGCM
    except ImportError:
        raise ImportError(
            "cryptography is required for obfuscation. "
            "Install it with: pip install chainlog[crypto] or pip install cryptography"
        )
    return AESGCM


class Obfuscator:
    """
    AES-GCM obfuscator.

    Example:
        >>> obfuscator = Obfuscator(Obfuscator.generate_key())
        >>> token = obfuscator.obfuscate("4111-1111-1111-1111")
        >>> token.startswith("!ENC!:{")
        True
        >>> obfuscator.unobfuscate("card=" + token)
        'card=4111-1111-1111-1111'
    """

    def __init__(self, key: Union[bytes, str]):
        """
        Args:
            key: 16, 24 or 32 byte AES key (str keys are UTF-8 encoded)

        Raises:
            ConfigurationError: If the key has the wrong size
        """
        if isinstance(key, str):
            key = key.encode("utf-8")
        if len(key) not in (16, 24, 32):
            raise ConfigurationError(
                f"Obfuscation key must be 16, 24 or 32 bytes long, got {len(key)}"
            )
        self._cipher = _aesgcm()(key)

    @staticmethod
    def generate_key(size: int = 32) -> bytes:
        return os.urandom(size)

    def obfuscate(self, value: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._cipher.encrypt(nonce, str(value).encode("utf-8"), None)
        encoded = base64.urlsafe_b64encode(nonce + ciphertext).decode("ascii")
        return f"{MARKER}{{{encoded}}}"

    def unobfuscate(self, value: str) -> str:
        """
        Decrypt the first obfuscated section of value, keeping the text around it.

        Text without an obfuscated section is returned unchanged.

        Raises:
            ObfuscationError: If the section cannot be decoded or authenticated
        """
        match = _ENCRYPTED.match(value)
        if not match:
            return value
        prefix, encoded, suffix = match.groups()
        try:
            payload = base64.urlsafe_b64decode(encoded.encode("ascii"))
        except ValueError as e:
            raise ObfuscationError(f"Invalid obfuscated payload: {e}") from e
        if len(payload) <= NONCE_SIZE:
            raise ObfuscationError("Obfuscated payload is too short")
        try:
            plaintext = self._cipher.decrypt(payload[:NONCE_SIZE], payload[NONCE_SIZE:], None)
        except Exception as e:
            raise ObfuscationError(f"Cannot decrypt obfuscated payload: {type(e).__name__}") from e
        return prefix + plaintext.decode("utf-8") + suffix
