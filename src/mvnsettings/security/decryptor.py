# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Decryption of server credentials in merged settings.

For each server's ``password`` and ``passphrase``:
1. Every ``${env.NAME}`` placeholder in the value is replaced by the
   environment variable's value; unset variables leave their placeholder
   as-is and produce a warning, and the value is never decrypted
2. Encrypted values (``{...}``) are decrypted with the master password read
   from the security file
3. Anything else is plaintext and left unchanged

The security file is a YAML document:

    master: "{encrypted master password}"
    relocation: /optional/path/to/another/settings-security.yaml
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

import yaml

from mvnsettings.errors import (
    DecryptionError,
    MissingMasterPasswordError,
    SettingsWarning,
)
from mvnsettings.security.audit import CredentialAuditLogger
from mvnsettings.security.cipher import MASTER_PASSWORD_MARKER, PlexusCipher, SecretCipher
from mvnsettings.settings.model import Server, Settings

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER = re.compile(r"\$\{env\.([^}]+)\}")

SECRET_FIELDS = ("password", "passphrase")


class SecurityFileError(Exception):
    """Raised when a security file exists but cannot be used."""

    pass


def read_master_password(security_file: Path, cipher: SecretCipher | None = None) -> str:
    """
    Read and decrypt the master password from a security file.

    Relocations are followed until a document without ``relocation`` is found.

    Args:
        security_file: Path to the security file
        cipher: Cipher used for the bootstrap decryption

    Returns:
        The decrypted master password

    Raises:
        SecurityFileError: If the file (or a relocation target) is unreadable,
                           malformed, or has no master password
        DecryptionError: If the master password cannot be decrypted
    """
    cipher = cipher or PlexusCipher()
    visited: set[Path] = set()
    current = security_file

    while True:
        resolved = current.expanduser().absolute()
        if resolved in visited:
            raise SecurityFileError(f"Security file relocation loop at {current}")
        visited.add(resolved)

        data = _read_security_document(resolved)

        relocation = data.get("relocation")
        if relocation:
            logger.debug(f"Security file {resolved} relocated to {relocation}")
            current = Path(str(relocation))
            continue

        master = data.get("master")
        if not master:
            raise SecurityFileError(f"Security file {resolved} does not define a master password")

        master = str(master)
        if cipher.is_encrypted(master):
            return cipher.decrypt_decorated(master, MASTER_PASSWORD_MARKER)
        return master


def _read_security_document(path: Path) -> dict:
    if not path.exists() or path.is_dir():
        raise SecurityFileError(f"Security file not found: {path}")
    try:
        with open(path, encoding="utf-8") as file:
            data = yaml.safe_load(file.read()) or {}
    except OSError as err:
        raise SecurityFileError(f"Failed to open security file {path}: {err}") from err
    except yaml.YAMLError as err:
        raise SecurityFileError(f"Failed to parse security file {path}: {err}") from err

    if not isinstance(data, dict):
        raise SecurityFileError(f"Security file {path} must contain a mapping")
    return data


class CredentialDecryptor:
    """
    Decrypts server credentials in place.

    Attributes:
        cipher: Cipher used to recognize and decrypt secrets
        environ: Environment used for ``${env.NAME}`` placeholders
        audit: Audit logger for credential events
    """

    def __init__(
        self,
        cipher: SecretCipher | None = None,
        environ: Mapping[str, str] | None = None,
        audit: CredentialAuditLogger | None = None,
    ) -> None:
        self.cipher = cipher or PlexusCipher()
        self.environ = environ if environ is not None else os.environ
        self.audit = audit or CredentialAuditLogger()

    def decrypt(
        self,
        settings: Settings,
        security_file: str | Path | None,
        warnings: list[SettingsWarning] | None = None,
    ) -> Settings:
        """
        Decrypt every server's password and passphrase.

        Args:
            settings: Settings to decrypt (mutated in place)
            security_file: Path to the security file holding the master password
            warnings: List receiving non-fatal warnings

        Returns:
            The same settings object

        Raises:
            MissingMasterPasswordError: If an encrypted value is found but no
                                        master password is available
            DecryptionError: If a value or the master password cannot be decrypted
        """
        if warnings is None:
            warnings = []

        master_password = self._load_master_password(security_file)

        for server in settings.servers:
            logger.debug(f"Processing credentials for server {server.id}")
            for field in SECRET_FIELDS:
                value = getattr(server, field)
                if value is None:
                    continue
                setattr(server, field, self._decrypt_value(server, field, value, master_password, warnings))

        return settings

    def _load_master_password(self, security_file: str | Path | None) -> str | None:
        if security_file is None:
            self.audit.log_master_password("none", available=False)
            return None

        path = Path(security_file)
        if not path.exists() or path.is_dir():
            logger.debug(f"No security file found at {path}")
            self.audit.log_master_password(str(path), available=False)
            return None

        try:
            master_password = read_master_password(path, self.cipher)
        except SecurityFileError as err:
            # An unusable security file is treated like a missing one; it only
            # becomes fatal once an encrypted value needs the master password.
            logger.warning(f"Ignoring security file: {err}")
            self.audit.log_master_password(str(path), available=False)
            return None
        except DecryptionError as err:
            raise DecryptionError(f"Unable to decrypt master password from {path}") from err

        self.audit.log_master_password(str(path), available=True)
        return master_password

    def _resolve_env(
        self, server: Server, field: str, match: re.Match[str], warnings: list[SettingsWarning]
    ) -> str:
        variable = match.group(1)
        resolved = self.environ.get(variable)
        self.audit.log_env_resolution(server.id, field, variable, resolved is not None)
        if resolved is None:
            warning = SettingsWarning(
                f"The {field} of server {server.id} uses an unknown env variable {variable}",
                source="credentials",
            )
            logger.warning(str(warning))
            warnings.append(warning)
            return match.group(0)
        return resolved

    def _decrypt_value(
        self,
        server: Server,
        field: str,
        value: str,
        master_password: str | None,
        warnings: list[SettingsWarning],
    ) -> str:
        if ENV_PLACEHOLDER.search(value):
            return ENV_PLACEHOLDER.sub(
                lambda match: self._resolve_env(server, field, match, warnings), value
            )

        if not self.cipher.is_encrypted(value):
            return value

        if master_password is None:
            raise MissingMasterPasswordError(
                f"Settings contain encrypted credentials for server {server.id} "
                "yet no usable security file exists"
            )

        try:
            decrypted = self.cipher.decrypt_decorated(value, master_password)
        except DecryptionError as err:
            self.audit.log_decryption_error(server.id, field, str(err))
            raise DecryptionError(f"Unable to decrypt the {field} of server {server.id}") from err

        self.audit.log_decryption(server.id, field)
        logger.debug(f"Successfully decrypted {field} for server {server.id}")
        return decrypted
