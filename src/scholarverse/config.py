"""Configuration management via .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


@dataclass
class ExplainProviderConfig:
    name: str
    api_key: str = ""
    base_url: str = ""
    model: str = ""


@dataclass
class AppConfig:
    # Paths
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "scholarverse")
    config_dir: Path = field(
        default_factory=lambda: _xdg_config_home() / "scholarverse"
    )
    static_dir: Path = field(default_factory=lambda: Path.cwd() / "public")
    db_path: Path = field(init=False)

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    fallback_origin: str = ""  # secondary deployment serving the same page images

    # Explanations
    explain_provider: str = "openai"
    providers: dict[str, ExplainProviderConfig] = field(default_factory=dict)

    # Reading
    reading_interval: float = 5.0  # seconds between reading-time logs

    log_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.db_path = self.data_dir / "scholarverse.db"
        self.log_path = self.data_dir / "scholarverse.log"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @property
    def pages_dir(self) -> Path:
        return self.static_dir / "pdfbooks"

    def get_active_provider(self) -> Optional[ExplainProviderConfig]:
        return self.providers.get(self.explain_provider)


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then config dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _xdg_config_home() / "scholarverse" / ".env",
        Path.home() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    defaults = AppConfig()
    host = os.getenv("SCHOLARVERSE_HOST", defaults.host)
    port = int(os.getenv("SCHOLARVERSE_PORT", str(defaults.port)))
    config = AppConfig(
        static_dir=Path(
            os.getenv("SCHOLARVERSE_STATIC_DIR", str(defaults.static_dir))
        ).expanduser(),
        host=host,
        port=port,
        fallback_origin=os.getenv(
            "SCHOLARVERSE_FALLBACK_ORIGIN", defaults.fallback_origin
        ),
        explain_provider=os.getenv(
            "SCHOLARVERSE_EXPLAIN_PROVIDER", defaults.explain_provider
        ),
        reading_interval=float(
            os.getenv("SCHOLARVERSE_READING_INTERVAL", str(defaults.reading_interval))
        ),
    )

    # OpenAI-compatible providers with vision-capable default models
    provider_defs = {
        "openai": (
            "OPENAI_API_KEY",
            "OPENAI_BASE_URL",
            "OPENAI_MODEL",
            "https://api.openai.com/v1",
            "gpt-4o-mini",
        ),
        "openrouter": (
            "OPENROUTER_API_KEY",
            "OPENROUTER_BASE_URL",
            "OPENROUTER_MODEL",
            "https://openrouter.ai/api/v1",
            "google/gemini-2.0-flash-001",
        ),
        "qwen": (
            "QWEN_API_KEY",
            "QWEN_BASE_URL",
            "QWEN_MODEL",
            "https://dashscope.aliyuncs.com/compatible-mode/v1",
            "qwen-vl-plus",
        ),
        "glm": (
            "GLM_API_KEY",
            "GLM_BASE_URL",
            "GLM_MODEL",
            "https://open.bigmodel.cn/api/paas/v4",
            "glm-4v-flash",
        ),
        "ollama": (
            "",
            "OLLAMA_BASE_URL",
            "OLLAMA_MODEL",
            "http://localhost:11434/v1",
            "llava:7b",
        ),
    }

    for name, (
        key_env,
        url_env,
        model_env,
        default_url,
        default_model,
    ) in provider_defs.items():
        api_key = os.getenv(key_env, "") if key_env else ""
        base_url = os.getenv(url_env, default_url)
        model = os.getenv(model_env, default_model)
        config.providers[name] = ExplainProviderConfig(
            name=name,
            api_key=api_key,
            base_url=base_url,
            model=model,
        )

    return config
