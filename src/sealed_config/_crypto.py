"""Password-based AES-256-CBC encryption of configuration text.

Every packet is self-describing::

    base64( salt[16] || iv[16] || AES-256-CBC-PKCS7(utf8(plaintext)) )

The key is derived per packet with PBKDF2-HMAC-SHA256 over the packet's own
salt, so identical plaintexts never produce identical packets.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import os
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ._types import ConfigInputError, EncryptionError

SALT_SIZE = 16
IV_SIZE = 16
KEY_SIZE = 32
ITERATIONS = 10_000
HEADER_SIZE = SALT_SIZE + IV_SIZE


@runtime_checkable
class EncryptionProvider(Protocol):
    """Anything that can turn text into an opaque string and back."""

    def encrypt(self, plaintext: str, password: str) -> str:
        ...

    def decrypt(self, packet: str, password: str) -> str:
        ...

    async def aencrypt(self, plaintext: str, password: str) -> str:
        ...

    async def adecrypt(self, packet: str, password: str) -> str:
        ...


class AesEncryptionEngine:
    """AES-256-CBC with PBKDF2-SHA256 key derivation.

    >>> engine = AesEncryptionEngine()
    >>> engine.decrypt(engine.encrypt("sk-123", "pw1"), "pw1")
    'sk-123'
    """

    def __init__(self, iterations: int = ITERATIONS) -> None:
        if iterations < 1:
            raise ValueError("iterations must be >= 1")
        self.iterations = iterations

    def __repr__(self) -> str:
        return f"AesEncryptionEngine(iterations={self.iterations})"

    # -- key derivation -----------------------------------------------------

    def derive_key(self, password: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    # -- blocking API -------------------------------------------------------

    def encrypt(self, plaintext: str, password: str) -> str:
        """Encrypt *plaintext* into a base64 packet with fresh salt and IV."""
        if not plaintext:
            raise ConfigInputError("Plain text cannot be empty")
        if not password:
            raise ConfigInputError("Password cannot be empty")

        try:
            salt = os.urandom(SALT_SIZE)
            iv = os.urandom(IV_SIZE)
            key = self.derive_key(password, salt)

            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

            encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (ValueError, TypeError, UnicodeError) as exc:
            raise EncryptionError("encryption", "Failed to encrypt data") from exc

        return base64.b64encode(salt + iv + ciphertext).decode("ascii")

    def decrypt(self, packet: str, password: str) -> str:
        """Decrypt a packet produced by :meth:`encrypt`.

        Wrong password, tampered bytes and truncated packets all raise the
        same ``EncryptionError``.
        """
        if not packet:
            raise ConfigInputError("Cipher text cannot be empty")
        if not password:
            raise ConfigInputError("Password cannot be empty")

        try:
            raw = base64.b64decode(packet.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise EncryptionError("decryption", "malformed packet") from exc

        if len(raw) < HEADER_SIZE:
            raise EncryptionError("decryption", "malformed packet")

        salt = raw[:SALT_SIZE]
        iv = raw[SALT_SIZE:HEADER_SIZE]
        ciphertext = raw[HEADER_SIZE:]

        try:
            key = self.derive_key(password, salt)
            decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plain = unpadder.update(padded) + unpadder.finalize()
            return plain.decode("utf-8")
        except (ValueError, TypeError, UnicodeError) as exc:
            raise EncryptionError("decryption", "Failed to decrypt data") from exc

    # -- non-blocking API ---------------------------------------------------

    async def aencrypt(self, plaintext: str, password: str) -> str:
        return await asyncio.to_thread(self.encrypt, plaintext, password)

    async def adecrypt(self, packet: str, password: str) -> str:
        return await asyncio.to_thread(self.decrypt, packet, password)
