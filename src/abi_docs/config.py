"""
Configuration for abi-docs.

Manages the ABI variant, check mode and output naming used when rendering
interface documents found on disk.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from abi_docs.errors import ConfigError
from abi_docs.layout import AbiVariant
from abi_docs.loader import INTERFACE_SUFFIXES


@dataclass
class AbiDocsConfig:
    """Configuration for rendering interface documents.

    Attributes:
        variant: ABI variant used for layout and result documentation
        check: Compare with existing output instead of writing it
        write_hrefs: Also write the anchor map as ``<stem>.hrefs.json``
        input_suffixes: File suffixes recognised as interface documents
        output_suffix: Suffix of the rendered Markdown file
        hrefs_suffix: Suffix of the anchor map file
        log_level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_logs: True for JSON logs, False for console, None to auto-detect
    """

    variant: AbiVariant = AbiVariant.CALLER
    check: bool = False
    write_hrefs: bool = False
    input_suffixes: tuple[str, ...] = INTERFACE_SUFFIXES
    output_suffix: str = ".abi.md"
    hrefs_suffix: str = ".hrefs.json"
    log_level: str = "INFO"
    json_logs: bool | None = None

    def __post_init__(self):
        """Normalize variant and suffix values."""
        try:
            self.variant = AbiVariant(self.variant)
        except ValueError as e:
            raise ConfigError(
                f"unknown ABI variant: {self.variant!r}",
                context={"key": "variant", "value": self.variant},
                cause=e,
            ) from e
        if isinstance(self.input_suffixes, str):
            self.input_suffixes = (self.input_suffixes,)
        self.input_suffixes = tuple(self.input_suffixes)
        if not self.input_suffixes:
            raise ConfigError("input_suffixes must not be empty", context={"key": "input_suffixes"})
        self.log_level = str(self.log_level).upper()

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "AbiDocsConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            AbiDocsConfig instance
        """
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"failed to load config {yaml_path}", context={"path": str(yaml_path)}, cause=e
            ) from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AbiDocsConfig":
        """Create config from dictionary.

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"unknown config keys: {', '.join(unknown)}", context={"keys": unknown}
            )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant": self.variant.value,
            "check": self.check,
            "write_hrefs": self.write_hrefs,
            "input_suffixes": list(self.input_suffixes),
            "output_suffix": self.output_suffix,
            "hrefs_suffix": self.hrefs_suffix,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
        }

    def merged(self, **overrides: Any) -> "AbiDocsConfig":
        """Return a copy with the non-None ``overrides`` applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(data)


# Default configuration
DEFAULT_CONFIG = AbiDocsConfig()
