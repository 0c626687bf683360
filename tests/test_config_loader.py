"""
Tests for configuration loader.

This module tests the ConfigLoader class including file loading,
environment variable processing, and configuration merging.
"""

import pytest
import json
import os
import tempfile
from typing import Any, Dict, Generator
from unittest.mock import patch

from pydrop.infrastructure.config.loader import ConfigLoader
from pydrop.infrastructure.config.models import ApplicationConfig


class TestConfigLoader:
    """Test cases for ConfigLoader class."""

    @pytest.fixture
    def config_loader(self) -> ConfigLoader:
        """Create a ConfigLoader instance."""
        return ConfigLoader()

    @pytest.fixture
    def sample_config_dict(self) -> Dict[str, Any]:
        """Sample configuration dictionary."""
        return {
            "name": "Test Client",
            "version": "1.0.0",
            "debug": True,
            "dropbox": {
                "access_token": "file-token",
                "root_namespace_id": "3235641",
                "timeout": 60.0
            },
            "upload": {
                "chunk_size": 8388608,
                "mode": "add",
                "autorename": False
            },
            "logging": {
                "level": "DEBUG",
                "console_enabled": True,
                "file_enabled": False
            }
        }

    @pytest.fixture
    def temp_json_file(self, sample_config_dict: Dict[str, Any]) -> Generator[str, None, None]:
        """Create temporary JSON config file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump(sample_config_dict, f)
            temp_path = f.name

        yield temp_path

        # Cleanup
        if os.path.exists(temp_path):
            os.unlink(temp_path)

    @pytest.fixture
    def temp_yaml_file(self) -> Generator[str, None, None]:
        """Create temporary YAML config file."""
        yaml_content = """
name: Test Client
version: 1.0.0
debug: true
dropbox:
  access_token: file-token
  root_namespace_id: "3235641"
  timeout: 60.0
upload:
  chunk_size: 8388608
  mode: add
  autorename: false
logging:
  level: DEBUG
  console_enabled: true
  file_enabled: false
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(yaml_content.strip())
            temp_path = f.name

        yield temp_path

        # Cleanup
        if os.path.exists(temp_path):
            os.unlink(temp_path)

    def test_config_loader_initialization(self, config_loader: ConfigLoader) -> None:
        """Test ConfigLoader initialization."""
        assert config_loader._env_prefix == "PYDROP_"

    def test_load_config_no_file(self, config_loader: ConfigLoader) -> None:
        """Test loading config without file (defaults only)."""
        with patch.dict(os.environ, {}, clear=True):
            config = config_loader.load_config()

        assert isinstance(config, ApplicationConfig)
        assert config.name == "pydrop"
        assert config.version == "0.1.0"
        assert config.debug is False
        assert config.upload.chunk_size == 140_000_000
        assert config.dropbox.access_token is None
        assert config.config_file_path is None

    def test_load_config_from_json_file(self, config_loader: ConfigLoader, temp_json_file: str) -> None:
        """Test loading config from JSON file."""
        with patch.dict(os.environ, {}, clear=True):
            config = config_loader.load_config(temp_json_file)

        assert config.name == "Test Client"
        assert config.debug is True
        assert config.dropbox.access_token == "file-token"
        assert config.dropbox.root_namespace_id == "3235641"
        assert config.dropbox.timeout == 60.0
        assert config.upload.chunk_size == 8388608
        assert config.upload.mode == "add"
        assert config.upload.autorename is False
        assert config.logging.level == "DEBUG"
        assert config.config_file_path == temp_json_file

    def test_load_config_from_yaml_file(self, config_loader: ConfigLoader, temp_yaml_file: str) -> None:
        """Test loading config from YAML file."""
        with patch.dict(os.environ, {}, clear=True):
            config = config_loader.load_config(temp_yaml_file)

        assert config.name == "Test Client"
        assert config.dropbox.root_namespace_id == "3235641"
        assert config.upload.mode == "add"
        assert config.upload.autorename is False

    def test_load_config_file_not_found(self, config_loader: ConfigLoader) -> None:
        """Test loading config with non-existent file."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            config_loader.load_config("nonexistent.yaml")

    def test_load_config_unsupported_format(self, config_loader: ConfigLoader) -> None:
        """Test loading config with unsupported file format."""
        with tempfile.NamedTemporaryFile(suffix='.txt', delete=False) as f:
            temp_path = f.name

        try:
            with pytest.raises(ValueError, match="Unsupported configuration file format"):
                config_loader.load_config(temp_path)
        finally:
            os.unlink(temp_path)

    def test_load_config_invalid_json(self, config_loader: ConfigLoader) -> None:
        """Test loading config with invalid JSON."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write('{"invalid": json}')
            temp_path = f.name

        try:
            with pytest.raises(ValueError, match="Invalid JSON"):
                config_loader.load_config(temp_path)
        finally:
            os.unlink(temp_path)

    def test_load_config_invalid_yaml(self, config_loader: ConfigLoader) -> None:
        """Test loading config with invalid YAML."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write('dropbox: [unclosed')
            temp_path = f.name

        try:
            with pytest.raises(ValueError, match="Invalid YAML"):
                config_loader.load_config(temp_path)
        finally:
            os.unlink(temp_path)

    def test_load_config_empty_yaml(self, config_loader: ConfigLoader) -> None:
        """Test loading an empty YAML file yields defaults."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
            temp_path = f.name

        try:
            with patch.dict(os.environ, {}, clear=True):
                config = config_loader.load_config(temp_path)
            assert config.name == "pydrop"
        finally:
            os.unlink(temp_path)

    def test_load_config_invalid_values(self, config_loader: ConfigLoader) -> None:
        """Test that model validation errors surface from the loader."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"upload": {"chunk_size": 0}}, f)
            temp_path = f.name

        try:
            with pytest.raises(ValueError, match="chunk size"):
                config_loader.load_config(temp_path)
        finally:
            os.unlink(temp_path)

    @patch.dict(os.environ, {
        'PYDROP_DEBUG': 'true',
        'PYDROP_ACCESS_TOKEN': 'env-token',
        'PYDROP_ROOT_NAMESPACE_ID': '99',
        'PYDROP_TIMEOUT': '30',
        'PYDROP_CHUNK_SIZE': '1048576',
        'PYDROP_UPLOAD_MODE': 'add',
        'PYDROP_AUTORENAME': 'no',
        'PYDROP_MUTE': 'yes',
        'PYDROP_LOG_LEVEL': 'WARNING',
        'PYDROP_LOG_FILE': 'on'
    }, clear=True)
    def test_load_config_from_environment(self, config_loader: ConfigLoader) -> None:
        """Test loading config from environment variables."""
        config = config_loader.load_config()

        assert config.debug is True
        assert config.dropbox.access_token == "env-token"
        assert config.dropbox.root_namespace_id == "99"
        assert config.dropbox.timeout == 30.0
        assert config.upload.chunk_size == 1048576
        assert config.upload.mode == "add"
        assert config.upload.autorename is False
        assert config.upload.mute is True
        assert config.logging.level == "WARNING"
        assert config.logging.file_enabled is True

    def test_environment_overrides_file(self, config_loader: ConfigLoader, temp_json_file: str) -> None:
        """Test that environment variables take precedence over the file."""
        with patch.dict(os.environ, {'PYDROP_ACCESS_TOKEN': 'env-token'}, clear=True):
            config = config_loader.load_config(temp_json_file)

        assert config.dropbox.access_token == "env-token"
        assert config.dropbox.root_namespace_id == "3235641"

    @patch.dict(os.environ, {'PYDROP_CHUNK_SIZE': 'large'}, clear=True)
    def test_invalid_environment_value(self, config_loader: ConfigLoader) -> None:
        """Test invalid environment variable values."""
        with pytest.raises(ValueError, match="Invalid value for PYDROP_CHUNK_SIZE"):
            config_loader.load_config()

    def test_save_and_reload_yaml(self, config_loader: ConfigLoader, tmp_path) -> None:
        """Test saving config as YAML and loading it back."""
        config = ApplicationConfig()
        config.upload.mode = "add"
        output = tmp_path / "pydrop.yaml"

        config_loader.save_config(config, str(output), "yaml")
        with patch.dict(os.environ, {}, clear=True):
            reloaded = config_loader.load_config(str(output))

        assert reloaded.upload.mode == "add"
        assert reloaded.upload.chunk_size == config.upload.chunk_size
        assert "config_file_path" not in output.read_text()

    def test_save_json(self, config_loader: ConfigLoader, tmp_path) -> None:
        """Test saving config as JSON."""
        output = tmp_path / "pydrop.json"

        config_loader.save_config(ApplicationConfig(), str(output), "json")

        data = json.loads(output.read_text())
        assert data["dropbox"]["token_env_var"] == "DROPBOX_TOKEN"
        assert data["upload"]["chunk_size"] == 140_000_000

    def test_save_unsupported_format(self, config_loader: ConfigLoader, tmp_path) -> None:
        """Test saving config in an unsupported format."""
        with pytest.raises(ValueError, match="Unsupported format"):
            config_loader.save_config(ApplicationConfig(), str(tmp_path / "c.toml"), "toml")

    def test_parse_bool(self, config_loader: ConfigLoader) -> None:
        """Test boolean parsing from strings."""
        for value in ('true', 'TRUE', '1', 'yes', 'on', 'enabled'):
            assert config_loader._parse_bool(value) is True
        for value in ('false', '0', 'no', 'off', ''):
            assert config_loader._parse_bool(value) is False

    def test_merge_configs(self, config_loader: ConfigLoader) -> None:
        """Test recursive configuration merging."""
        base = {"dropbox": {"access_token": "a", "timeout": 10}, "debug": False}
        override = {"dropbox": {"access_token": "b"}, "debug": True}

        merged = config_loader._merge_configs(base, override)

        assert merged == {"dropbox": {"access_token": "b", "timeout": 10}, "debug": True}
        assert base["dropbox"]["access_token"] == "a"

    def test_set_nested_value(self, config_loader: ConfigLoader) -> None:
        """Test setting nested values with dot notation."""
        config: Dict[str, Any] = {}

        config_loader._set_nested_value(config, "upload.chunk_size", 10)

        assert config == {"upload": {"chunk_size": 10}}
