"""Service module exports."""

from . import backup, progress, restore, serializers, snapshot, snapshot_writer

__all__ = [
    "backup",
    "progress",
    "restore",
    "serializers",
    "snapshot",
    "snapshot_writer",
]
