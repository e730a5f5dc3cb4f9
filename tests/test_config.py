"""Tests for configuration."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from scholarverse.config import AppConfig, load_config


_ENV_NAMES = (
    "SCHOLARVERSE_EXPLAIN_PROVIDER",
    "SCHOLARVERSE_STATIC_DIR",
    "SCHOLARVERSE_FALLBACK_ORIGIN",
    "SCHOLARVERSE_READING_INTERVAL",
    "SCHOLARVERSE_HOST",
    "SCHOLARVERSE_PORT",
    "OPENAI_API_KEY",
    "OPENROUTER_MODEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    yield
    # load_dotenv writes to os.environ directly
    for name in _ENV_NAMES:
        os.environ.pop(name, None)


class TestAppConfig:
    def test_defaults(self, tmp_path: Path):
        config = AppConfig(data_dir=tmp_path / "data", config_dir=tmp_path / "config")
        assert config.explain_provider == "openai"
        assert config.reading_interval == 5.0
        assert config.fallback_origin == ""
        assert config.db_path == tmp_path / "data" / "scholarverse.db"
        assert config.log_path == tmp_path / "data" / "scholarverse.log"

    def test_dirs_created(self, tmp_path: Path):
        data = tmp_path / "data"
        conf = tmp_path / "config"
        AppConfig(data_dir=data, config_dir=conf)
        assert data.exists()
        assert conf.exists()

    def test_pages_dir(self, tmp_path: Path):
        config = AppConfig(
            data_dir=tmp_path / "d", config_dir=tmp_path / "c", static_dir=tmp_path / "pub"
        )
        assert config.pages_dir == tmp_path / "pub" / "pdfbooks"

    def test_get_active_provider_missing(self, tmp_path: Path):
        config = AppConfig(data_dir=tmp_path / "d", config_dir=tmp_path / "c")
        config.explain_provider = "nonexistent"
        assert config.get_active_provider() is None


class TestLoadConfig:
    def test_load_from_env_file(self, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "SCHOLARVERSE_EXPLAIN_PROVIDER=openrouter\n"
            "SCHOLARVERSE_FALLBACK_ORIGIN=https://books.example.com\n"
            "SCHOLARVERSE_READING_INTERVAL=2.5\n"
            "SCHOLARVERSE_PORT=9001\n"
            "OPENAI_API_KEY=sk-test-123\n"
            "OPENROUTER_MODEL=openai/gpt-4o\n"
        )
        config = load_config(env_path=env_file)
        assert config.explain_provider == "openrouter"
        assert config.fallback_origin == "https://books.example.com"
        assert config.reading_interval == 2.5
        assert config.port == 9001
        assert config.providers["openai"].api_key == "sk-test-123"
        assert config.providers["openrouter"].model == "openai/gpt-4o"

    def test_all_providers_loaded(self, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        config = load_config(env_path=env_file)
        expected = {"openai", "openrouter", "qwen", "glm", "ollama"}
        assert set(config.providers.keys()) == expected

    def test_no_hardcoded_credentials(self, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        config = load_config(env_path=env_file)
        assert config.providers["openai"].api_key == ""
        assert config.providers["ollama"].api_key == ""
        assert "localhost" in config.providers["ollama"].base_url
