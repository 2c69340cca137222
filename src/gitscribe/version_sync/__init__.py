"""
Version propagation into sibling manifest files.

See :mod:`gitscribe.version_sync.sync` for the supported formats.
"""

from .sync import SyncFileFormat, VersionSyncError, VersionSyncFile, sync_version_to_files  # noqa: F401
