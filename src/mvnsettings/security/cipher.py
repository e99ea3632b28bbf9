# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Password encryption compatible with Maven's settings security.

Encrypted values are written as ``{base64}``. The payload layout is:

    salt (8 bytes) + pad length (1 byte) + AES ciphertext + random padding

The AES-128-CBC key and IV are the two halves of SHA-256(password + salt).
The master password itself is encrypted the same way using the fixed
password ``settings.security``, so it can be decrypted without any other
secret.

Uses AES and SHA-256 from the cryptography library.
"""

from __future__ import annotations

import base64
import re
import secrets
from typing import Protocol

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from mvnsettings.errors import DecryptionError

MASTER_PASSWORD_MARKER = "settings.security"

SALT_SIZE = 8
CHUNK_SIZE = 16
SPICE_SIZE = 16

# Braces preceded by a backslash are escaped and never delimit ciphertext
_ENCRYPTED_PATTERN = re.compile(r".*?[^\\]?\{(.*?[^\\])\}.*", re.DOTALL)


class SecretCipher(Protocol):
    """Protocol for recognizing and decrypting decorated secrets."""

    def is_encrypted(self, value: str | None) -> bool:
        """Return True if the value is in the encrypted wire format."""
        ...

    def decrypt_decorated(self, value: str, password: str) -> str:
        """Decrypt a ``{...}`` value."""
        ...


class PlexusCipher:
    """
    Password-based cipher for settings secrets.

    Every encryption uses a fresh random salt, so encrypting the same value
    twice yields different ciphertexts that both decrypt to the same value.
    """

    def is_encrypted(self, value: str | None) -> bool:
        """
        Check whether a value contains a brace-wrapped ciphertext.

        Args:
            value: Value to check (None and empty strings are never encrypted)

        Returns:
            True if the value is in the encrypted wire format
        """
        if not value:
            return False
        return _ENCRYPTED_PATTERN.search(value) is not None

    def decorate(self, text: str) -> str:
        """Wrap a base64 payload in braces."""
        return "{" + text + "}"

    def undecorate(self, value: str) -> str:
        """
        Extract the base64 payload from a decorated value.

        Raises:
            DecryptionError: If the value is not in the encrypted wire format
        """
        match = _ENCRYPTED_PATTERN.search(value) if value else None
        if match is None:
            raise DecryptionError("Value is not an encrypted string")
        return match.group(1)

    def encrypt(self, plaintext: str, password: str) -> str:
        """
        Encrypt a value with a random salt.

        Args:
            plaintext: Value to encrypt
            password: Password the key is derived from

        Returns:
            Base64 payload (not decorated)
        """
        salt = secrets.token_bytes(SALT_SIZE)
        encryptor = self._create_cipher(password, salt).encryptor()

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encrypted = encryptor.update(padded) + encryptor.finalize()

        pad_len = CHUNK_SIZE - (SALT_SIZE + len(encrypted) + 1) % CHUNK_SIZE
        payload = salt + bytes([pad_len]) + encrypted + secrets.token_bytes(pad_len)

        return base64.b64encode(payload).decode("ascii")

    def decrypt(self, ciphertext: str, password: str) -> str:
        """
        Decrypt a base64 payload.

        Args:
            ciphertext: Base64 payload (not decorated)
            password: Password the key is derived from

        Returns:
            Decrypted plaintext

        Raises:
            DecryptionError: If decryption fails (wrong password, corrupt data)
        """
        try:
            payload = base64.b64decode(ciphertext)
        except ValueError as err:
            raise DecryptionError(f"Decryption failed: invalid base64 payload: {err}") from err

        if len(payload) < SALT_SIZE + 1:
            raise DecryptionError("Invalid encrypted data (too short)")

        salt = payload[:SALT_SIZE]
        pad_len = payload[SALT_SIZE]
        encrypted = payload[SALT_SIZE + 1 : len(payload) - pad_len]

        try:
            decryptor = self._create_cipher(password, salt).decryptor()
            padded = decryptor.update(encrypted) + decryptor.finalize()

            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plain = unpadder.update(padded) + unpadder.finalize()
            return plain.decode("utf-8")
        except ValueError as err:
            raise DecryptionError(f"Decryption failed: {err}") from err

    def encrypt_decorated(self, plaintext: str, password: str) -> str:
        """Encrypt a value and wrap the payload in braces."""
        return self.decorate(self.encrypt(plaintext, password))

    def decrypt_decorated(self, value: str, password: str) -> str:
        """Decrypt a ``{...}`` value."""
        return self.decrypt(self.undecorate(value), password)

    def encrypt_master_password(self, master_password: str) -> str:
        """Encrypt a master password with the fixed bootstrap password."""
        return self.encrypt_decorated(master_password, MASTER_PASSWORD_MARKER)

    def decrypt_master_password(self, value: str) -> str:
        """Decrypt a master password with the fixed bootstrap password."""
        return self.decrypt_decorated(value, MASTER_PASSWORD_MARKER)

    @staticmethod
    def _create_cipher(password: str, salt: bytes) -> Cipher:
        key, iv = _derive_key_and_iv(password.encode("utf-8"), salt)
        return Cipher(algorithms.AES(key), modes.CBC(iv))


def _derive_key_and_iv(password: bytes, salt: bytes) -> tuple[bytes, bytes]:
    """
    Derive AES key and IV from a password and salt.

    Each round hashes the previous round's digest (if any), the password and
    the salt, until enough bytes for key and IV are available.

    Returns:
        Tuple of 16-byte key and 16-byte IV
    """
    needed = SPICE_SIZE * 2
    key_and_iv = b""
    previous = b""

    while len(key_and_iv) < needed:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(previous)
        digest.update(password)
        digest.update(salt[:SALT_SIZE])
        previous = digest.finalize()
        key_and_iv += previous[: needed - len(key_and_iv)]

    return key_and_iv[:SPICE_SIZE], key_and_iv[SPICE_SIZE:needed]
