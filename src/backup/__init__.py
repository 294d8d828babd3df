# src/backup/__init__.py
"""Backup and restore of journal state."""

from src.backup.codec import BACKUP_VERSION, BackupState, dumps_backup, export_state, import_state
from src.backup.gist_client import GistBackupClient
from src.backup.settings import BackupSettings, GitHubConfig

__all__ = [
    "BACKUP_VERSION",
    "BackupSettings",
    "BackupState",
    "GistBackupClient",
    "GitHubConfig",
    "dumps_backup",
    "export_state",
    "import_state",
]
