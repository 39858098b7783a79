"""Filesystem helpers."""

from .fileops import delete_path, folder_size, move_all_files, move_file, temp_file, temp_name

__all__ = [
    "delete_path",
    "folder_size",
    "move_all_files",
    "move_file",
    "temp_file",
    "temp_name",
]
