"""
File utilities module for Filekit.

Provides stateless filesystem operations and an audited wrapper around them.
"""

from .file_ops import (
    DIR_MODE,
    FILE_MODE,
    Presence,
    append,
    atomic_write,
    clear_dir,
    copy,
    count_lines,
    exists,
    is_readable,
    list_files,
    make_dir,
    probe,
    read,
    read_bytes,
    remove,
    rename,
    write,
)
from .file_operator import FileOperator

__all__ = [
    'DIR_MODE',
    'FILE_MODE',
    'Presence',
    'append',
    'atomic_write',
    'clear_dir',
    'copy',
    'count_lines',
    'exists',
    'is_readable',
    'list_files',
    'make_dir',
    'probe',
    'read',
    'read_bytes',
    'remove',
    'rename',
    'write',
    'FileOperator',
]
