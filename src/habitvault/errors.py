"""Exceptions raised by the backup and restore operations."""

from __future__ import annotations


class BackupError(Exception):
    """Base class for failures surfaced to the user as a single notification."""


class AuthenticationRequired(BackupError):
    """No signed-in user; the operation refuses to start."""


class ExportFailedError(BackupError):
    """Reading the account failed, so no snapshot was produced."""


class InvalidBackupError(BackupError):
    """The selected file is not a backup this version can read."""


__all__ = [
    "AuthenticationRequired",
    "BackupError",
    "ExportFailedError",
    "InvalidBackupError",
]
