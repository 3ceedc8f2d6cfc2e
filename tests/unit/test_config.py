"""Tests for MatrixConfig loading from defaults, TOML and environment."""

import pytest

from matrix_mcp.config import DEFAULT_BASE_URL, MatrixConfig
from matrix_mcp.core.errors import ConfigurationError


class TestDefaults:
    """Configuration without any environment or config file."""

    def test_defaults(self, clean_env):
        config = MatrixConfig.from_env()
        assert config.api_key == ""
        assert config.base_url == DEFAULT_BASE_URL == "https://matrix.loot42.com"
        assert config.log_level == "INFO"
        assert config.structured_logging is True
        assert config.strict_arguments is False
        assert config.server_name == "matrix-mcp"

    def test_missing_api_key_fails_validation(self, clean_env):
        config = MatrixConfig.from_env()
        with pytest.raises(ConfigurationError, match="MATRIX_API_KEY environment variable is required"):
            config.validate()

    def test_empty_api_key_fails_validation(self, clean_env, monkeypatch):
        monkeypatch.setenv("MATRIX_API_KEY", "")
        with pytest.raises(ConfigurationError):
            MatrixConfig.from_env().validate()


class TestEnvironment:
    """Environment variables are the highest priority source."""

    def test_reads_api_key_and_base_url(self, clean_env, monkeypatch):
        monkeypatch.setenv("MATRIX_API_KEY", "secret")
        monkeypatch.setenv("MATRIX_BASE_URL", "http://localhost:8080")

        config = MatrixConfig.from_env()
        config.validate()
        assert config.api_key == "secret"
        assert config.base_url == "http://localhost:8080"

    def test_empty_base_url_keeps_default(self, clean_env, monkeypatch):
        monkeypatch.setenv("MATRIX_BASE_URL", "")
        assert MatrixConfig.from_env().base_url == DEFAULT_BASE_URL

    def test_logging_and_strict_flags(self, clean_env, monkeypatch):
        monkeypatch.setenv("MATRIX_MCP_LOG_LEVEL", "debug")
        monkeypatch.setenv("MATRIX_MCP_STRUCTURED_LOGGING", "false")
        monkeypatch.setenv("MATRIX_MCP_STRICT_ARGUMENTS", "yes")

        config = MatrixConfig.from_env()
        assert config.log_level == "DEBUG"
        assert config.structured_logging is False
        assert config.strict_arguments is True


class TestTomlFile:
    """TOML config file sits between defaults and environment."""

    @pytest.fixture
    def config_content(self):
        return """
[matrix]
api_key = "from-file"
base_url = "https://staging.matrix.test"

[logging]
level = "warning"
structured = false

[tools]
strict_arguments = true
"""

    def test_explicit_config_file(self, clean_env, config_content):
        path = clean_env / "custom.toml"
        path.write_text(config_content)

        config = MatrixConfig.from_env(str(path))
        assert config.api_key == "from-file"
        assert config.base_url == "https://staging.matrix.test"
        assert config.log_level == "WARNING"
        assert config.structured_logging is False
        assert config.strict_arguments is True

    def test_default_location_in_working_directory(self, clean_env, config_content):
        (clean_env / "matrix-mcp.toml").write_text(config_content)
        assert MatrixConfig.from_env().base_url == "https://staging.matrix.test"

    def test_config_file_from_env_var(self, clean_env, monkeypatch, config_content):
        path = clean_env / "elsewhere.toml"
        path.write_text(config_content)
        monkeypatch.setenv("MATRIX_MCP_CONFIG_FILE", str(path))
        assert MatrixConfig.from_env().api_key == "from-file"

    def test_environment_overrides_file(self, clean_env, monkeypatch, config_content):
        path = clean_env / "custom.toml"
        path.write_text(config_content)
        monkeypatch.setenv("MATRIX_API_KEY", "from-env")

        config = MatrixConfig.from_env(str(path))
        assert config.api_key == "from-env"
        assert config.base_url == "https://staging.matrix.test"

    def test_missing_file_falls_back_to_defaults(self, clean_env):
        config = MatrixConfig.from_env(str(clean_env / "absent.toml"))
        assert config.base_url == DEFAULT_BASE_URL

    def test_invalid_file_is_ignored(self, clean_env):
        path = clean_env / "broken.toml"
        path.write_text("[matrix\nbase_url = ")
        config = MatrixConfig.from_env(str(path))
        assert config.base_url == DEFAULT_BASE_URL


class TestHeaders:
    def test_shared_header_set(self):
        config = MatrixConfig(api_key="abc")
        assert config.build_headers() == {
            "Content-Type": "application/json",
            "x-api-key": "abc",
        }
