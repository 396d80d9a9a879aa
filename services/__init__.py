"""Service helpers shared across features."""

from .temporary_storage import create_scratch_file, remove_scratch_file, write_scratch_file

__all__ = ["create_scratch_file", "remove_scratch_file", "write_scratch_file"]
