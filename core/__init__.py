# Filekit - Core Module
"""
Core infrastructure for Filekit.
Error taxonomy, configuration and audit logging shared by the file operations and the CLI.
"""

from .errors import (
    ErrorKind,
    FileOpError,
    NotFoundError,
    PermissionDeniedError,
    AlreadyExistsError,
    IsDirectoryError,
    IOFaultError,
    UnsupportedError,
    CompositeError,
    map_os_error,
)
from .config import FilekitConfig, load_config, save_config
from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus

__all__ = [
    "ErrorKind",
    "FileOpError",
    "NotFoundError",
    "PermissionDeniedError",
    "AlreadyExistsError",
    "IsDirectoryError",
    "IOFaultError",
    "UnsupportedError",
    "CompositeError",
    "map_os_error",
    "FilekitConfig",
    "load_config",
    "save_config",
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
]

__version__ = "0.1.0"
