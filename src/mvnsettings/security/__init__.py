# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Credential security: cipher, master password handling, decryption and audit.
"""

from __future__ import annotations

from mvnsettings.security.audit import CredentialAuditLogger
from mvnsettings.security.cipher import MASTER_PASSWORD_MARKER, PlexusCipher, SecretCipher
from mvnsettings.security.decryptor import (
    CredentialDecryptor,
    SecurityFileError,
    read_master_password,
)

__all__ = [
    "CredentialDecryptor",
    "CredentialAuditLogger",
    "PlexusCipher",
    "SecretCipher",
    "SecurityFileError",
    "MASTER_PASSWORD_MARKER",
    "read_master_password",
]
