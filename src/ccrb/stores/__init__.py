"""Output sinks."""

from .file_writer import FileStore, PersistedFile, save_outputs

__all__ = ["FileStore", "PersistedFile", "save_outputs"]
