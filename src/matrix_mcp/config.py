"""
Server configuration for matrix-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (matrix-mcp.toml)
3. Default values (lowest priority)

Environment variables:
- MATRIX_API_KEY: Value sent in the x-api-key header (required)
- MATRIX_BASE_URL: Matrix API base URL (default: https://matrix.loot42.com)
- MATRIX_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- MATRIX_MCP_STRUCTURED_LOGGING: Emit JSON log lines (true/false)
- MATRIX_MCP_STRICT_ARGUMENTS: Reject malformed tool arguments instead of
  forwarding them to the API (true/false)
- MATRIX_MCP_CONFIG_FILE: Path to TOML config file

The configuration is built once at startup and passed to the server; it is
not modified while requests are being served.
"""

import os
import logging
import tomllib
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict, Optional

from matrix_mcp.core.client import API_KEY_HEADER, DEFAULT_BASE_URL
from matrix_mcp.core.errors import ConfigurationError
from matrix_mcp.core.logging_config import configure_logging


logger = logging.getLogger(__name__)


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("matrix-mcp")
    except PackageNotFoundError:
        return "1.0.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


@dataclass
class MatrixConfig:
    """Adapter configuration with support for env vars and TOML overrides."""

    # Matrix API access
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = True

    # Tool argument handling
    strict_arguments: bool = False

    # Server identity
    server_name: str = "matrix-mcp"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "MatrixConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("MATRIX_MCP_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in ["matrix-mcp.toml", ".matrix-mcp.toml"]:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config file {path}: {e}")
            return

        if "matrix" in data:
            matrix = data["matrix"]
            if "api_key" in matrix:
                self.api_key = str(matrix["api_key"])
            if "base_url" in matrix:
                self.base_url = str(matrix["base_url"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

        if "tools" in data:
            tools = data["tools"]
            if "strict_arguments" in tools:
                self.strict_arguments = _parse_bool(tools["strict_arguments"])

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if api_key := os.environ.get("MATRIX_API_KEY"):
            self.api_key = api_key

        if base_url := os.environ.get("MATRIX_BASE_URL"):
            self.base_url = base_url

        if level := os.environ.get("MATRIX_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("MATRIX_MCP_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        if strict := os.environ.get("MATRIX_MCP_STRICT_ARGUMENTS"):
            self.strict_arguments = _parse_bool(strict)

    def validate(self) -> None:
        """Check that the server can run with this configuration.

        Raises:
            ConfigurationError: If the API key is missing
        """
        if not self.api_key:
            raise ConfigurationError("MATRIX_API_KEY environment variable is required")

    def build_headers(self) -> Dict[str, str]:
        """Return the header set shared by every Matrix API request."""
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.api_key,
        }

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)
        configure_logging(
            level=level,
            format="structured" if self.structured_logging else "human",
        )
