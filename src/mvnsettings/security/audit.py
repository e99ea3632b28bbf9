# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
Audit logging for credential handling.

Records what happened to each server credential while settings are
decrypted:
- Where the master password came from
- Which server fields were decrypted or resolved from the environment
- Which placeholders could not be resolved
- Which decryptions failed

Never logs actual secret values.
"""

from __future__ import annotations

import logging
from pathlib import Path

AUDIT_LOGGER_NAME = "mvnsettings.security.audit"


class CredentialAuditLogger:
    """
    Dedicated logger for credential auditing.

    Messages go to the ``mvnsettings.security.audit`` logger, which does not
    propagate to the root logger. When ``audit_file`` is given they are also
    written to that file.
    Format: timestamp | level | event details
    """

    def __init__(
        self,
        audit_file: Path | None = None,
        enable_console: bool = False,
    ) -> None:
        """
        Initialize audit logger.

        Args:
            audit_file: Optional path to an audit log file
            enable_console: Also log to console (for debugging)
        """
        self.audit_file = audit_file
        self._logger = self._setup_logger(enable_console)

    def _setup_logger(self, enable_console: bool) -> logging.Logger:
        """Set up dedicated logger for credential auditing."""
        logger = logging.getLogger(AUDIT_LOGGER_NAME)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        if self.audit_file is not None:
            self.audit_file.parent.mkdir(parents=True, exist_ok=True)
            resolved = str(self.audit_file.absolute())
            if not any(
                isinstance(handler, logging.FileHandler) and handler.baseFilename == resolved
                for handler in logger.handlers
            ):
                file_handler = logging.FileHandler(self.audit_file)
                file_handler.setLevel(logging.INFO)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

        if enable_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        return logger

    def log_master_password(self, source: str, available: bool) -> None:
        """
        Log master password initialization.

        Args:
            source: Security file the master password was read from, or "none"
            available: Whether a master password could be obtained
        """
        status = "LOADED" if available else "UNAVAILABLE"
        self._logger.info(f"MASTER_PASSWORD {status} | source={source}")

    def log_decryption(self, server_id: str, field: str) -> None:
        """Log a successful decryption of a server field."""
        self._logger.info(f"DECRYPTED | server={server_id} | field={field}")

    def log_env_resolution(self, server_id: str, field: str, variable: str, resolved: bool) -> None:
        """
        Log an ``${env.NAME}`` placeholder lookup.

        Args:
            server_id: Server the field belongs to
            field: Field name (password or passphrase)
            variable: Environment variable name
            resolved: Whether the variable was set
        """
        if resolved:
            self._logger.info(f"ENV_RESOLVED | server={server_id} | field={field} | variable={variable}")
        else:
            self._logger.warning(f"ENV_UNRESOLVED | server={server_id} | field={field} | variable={variable}")

    def log_decryption_error(
        self,
        server_id: str,
        field: str,
        error: str,
    ) -> None:
        """
        Log decryption failure.

        Args:
            server_id: Server whose field failed to decrypt
            field: Field name (password or passphrase)
            error: Error message (sanitized, no sensitive data)
        """
        self._logger.error(
            f"DECRYPTION_FAILED | server={server_id} | field={field} | error={error}"
        )
