"""Test utilities for sealed-config."""

from __future__ import annotations

import base64
import binascii

from ._types import ConfigInputError, EncryptionError


class Base64EncryptionEngine:
    """Reversible stand-in for ``AesEncryptionEngine``.

    Encodes instead of encrypting and ignores the password, so documents
    written with it are easy to inspect in assertions. Never use it outside
    tests.

    >>> Base64EncryptionEngine().encrypt("secret", "ignored")
    'c2VjcmV0'
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def encrypt(self, plaintext: str, password: str) -> str:
        if not plaintext:
            raise ConfigInputError("Plain text cannot be empty")
        self.calls.append(("encrypt", plaintext))
        return base64.b64encode(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, packet: str, password: str) -> str:
        if not packet:
            raise ConfigInputError("Cipher text cannot be empty")
        self.calls.append(("decrypt", packet))
        try:
            return base64.b64decode(packet, validate=True).decode("utf-8")
        except (binascii.Error, ValueError) as exc:
            raise EncryptionError("decryption", "malformed packet") from exc

    async def aencrypt(self, plaintext: str, password: str) -> str:
        return self.encrypt(plaintext, password)

    async def adecrypt(self, packet: str, password: str) -> str:
        return self.decrypt(packet, password)
