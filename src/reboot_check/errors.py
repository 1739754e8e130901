"""Exceptions raised while building version snapshots."""


class RebootCheckError(Exception):
    """Base exception for reboot check operations."""

    pass


class SnapshotReadError(RebootCheckError):
    """An existing module tree, directory or symlink could not be read."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
