# SPDX-License-Identifier: GPL-2.0-only
# Copyright (C) 2025 mvnsettings contributors
"""
mvnsettings - Maven settings resolution for build tooling.

Tests for mvnsettings.security.audit module.

Tests the dedicated audit logger for credential handling.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mvnsettings.security.audit import AUDIT_LOGGER_NAME, CredentialAuditLogger


class TestCredentialAuditLogger:
    """Test CredentialAuditLogger implementation."""

    def test_initialization(self, tmp_path: Path) -> None:
        """Test that audit logger creates the audit file directory."""
        audit_file = tmp_path / "logs" / "audit.log"
        audit = CredentialAuditLogger(audit_file=audit_file)

        assert audit.audit_file == audit_file
        assert audit_file.parent.exists()

    def test_logger_does_not_propagate(self) -> None:
        """Test audit messages stay out of the root logger."""
        CredentialAuditLogger()

        assert logging.getLogger(AUDIT_LOGGER_NAME).propagate is False

    def test_log_master_password(self, tmp_path: Path) -> None:
        """Test logging master password availability."""
        audit_file = tmp_path / "audit.log"
        audit = CredentialAuditLogger(audit_file=audit_file)

        audit.log_master_password("/home/dev/.m2/settings-security.yaml", available=True)
        audit.log_master_password("none", available=False)

        content = audit_file.read_text()
        assert "MASTER_PASSWORD LOADED | source=/home/dev/.m2/settings-security.yaml" in content
        assert "MASTER_PASSWORD UNAVAILABLE | source=none" in content

    def test_log_decryption(self, tmp_path: Path) -> None:
        """Test logging a successful decryption."""
        audit_file = tmp_path / "audit.log"
        audit = CredentialAuditLogger(audit_file=audit_file)

        audit.log_decryption("nexus", "passphrase")

        assert "DECRYPTED | server=nexus | field=passphrase" in audit_file.read_text()

    def test_log_env_resolution(self, tmp_path: Path) -> None:
        """Test resolved and unresolved placeholders use different levels."""
        audit_file = tmp_path / "audit.log"
        audit = CredentialAuditLogger(audit_file=audit_file)

        audit.log_env_resolution("nexus", "password", "NEXUS_PASSWORD", resolved=True)
        audit.log_env_resolution("gitlab", "password", "GITLAB_TOKEN", resolved=False)

        content = audit_file.read_text()
        assert "INFO | ENV_RESOLVED | server=nexus | field=password | variable=NEXUS_PASSWORD" in content
        assert "WARNING | ENV_UNRESOLVED | server=gitlab | field=password | variable=GITLAB_TOKEN" in content

    def test_log_decryption_error(self, tmp_path: Path) -> None:
        """Test logging a decryption failure."""
        audit_file = tmp_path / "audit.log"
        audit = CredentialAuditLogger(audit_file=audit_file)

        audit.log_decryption_error("nexus", "password", "Decryption failed: bad padding")

        content = audit_file.read_text()
        assert "ERROR | DECRYPTION_FAILED | server=nexus | field=password" in content
        assert "bad padding" in content

    def test_same_file_not_added_twice(self, tmp_path: Path) -> None:
        """Test creating two audit loggers for one file writes each event once."""
        audit_file = tmp_path / "audit.log"
        CredentialAuditLogger(audit_file=audit_file)
        audit = CredentialAuditLogger(audit_file=audit_file)

        audit.log_decryption("nexus", "password")

        assert audit_file.read_text().count("DECRYPTED | server=nexus") == 1
