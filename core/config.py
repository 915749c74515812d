"""
Configuration for Filekit.

Settings live in a YAML file, optionally nested under a top-level
``filekit`` key. A missing or unreadable file yields the defaults.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml


DEFAULT_CONFIG_PATH = "filekit.yaml"
DEFAULT_BUFFER_SIZE = 64 * 1024
DEFAULT_ENCODING = "utf-8"
DEFAULT_AUDIT_LOG = "data/audit_log.jsonl"


@dataclass
class FilekitConfig:
    """Runtime settings for the CLI and the audited operator."""
    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str = DEFAULT_ENCODING
    audit_enabled: bool = True
    audit_log_path: str = DEFAULT_AUDIT_LOG

    def __post_init__(self):
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ValueError(f"buffer_size must be an integer, got {self.buffer_size!r}")
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilekitConfig":
        """Build settings from the parsed YAML mapping."""
        io_section = data.get("io") or {}
        audit_section = data.get("audit") or {}
        return cls(
            buffer_size=io_section.get("buffer_size", DEFAULT_BUFFER_SIZE),
            encoding=io_section.get("encoding", DEFAULT_ENCODING),
            audit_enabled=bool(audit_section.get("enabled", True)),
            audit_log_path=str(audit_section.get("log_path", DEFAULT_AUDIT_LOG))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "io": {
                "buffer_size": self.buffer_size,
                "encoding": self.encoding,
            },
            "audit": {
                "enabled": self.audit_enabled,
                "log_path": self.audit_log_path,
            }
        }


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> FilekitConfig:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        FilekitConfig built from the file, or the defaults

    Raises:
        ValueError: If the file holds invalid values
    """
    path = Path(config_path)
    if not path.exists():
        return FilekitConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return FilekitConfig()

    if not isinstance(data, dict):
        return FilekitConfig()
    return FilekitConfig.from_dict(data.get("filekit", data) or {})


def save_config(config: FilekitConfig, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> None:
    """Write settings back to the YAML file, keeping unrelated top-level keys."""
    path = Path(config_path)
    document: Dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                existing = yaml.safe_load(f) or {}
            if isinstance(existing, dict):
                document = existing
        except (OSError, yaml.YAMLError):
            document = {}

    document["filekit"] = config.to_dict()

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(document, f, default_flow_style=False)
