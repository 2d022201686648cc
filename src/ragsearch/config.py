"""Configuration loading for ragsearch.

Settings come from a YAML file when one is found, otherwise from built-in
defaults, with a few environment variable overrides applied on top.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ragsearch.embedders.remote import RemoteEmbedderConfig
from ragsearch.errors import ConfigurationError
from ragsearch.storage.qdrant_store import QdrantConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RAGSEARCH_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ragsearch" / "config.yaml"


@dataclass
class EmbedderConfig:
    type: str = "tfidf"
    remote: Optional[RemoteEmbedderConfig] = None


@dataclass
class ChunkerConfig:
    type: str = "sentence"
    sentences_per_chunk: int = 5
    overlap_sentences: int = 1


@dataclass
class VectorStoreConfig:
    type: str = "memory"
    qdrant: Optional[QdrantConfig] = None


@dataclass
class SummarizerConfig:
    type: str = "frequency"
    max_sentences: int = 5


@dataclass
class AppConfig:
    """Top-level application configuration."""

    embedder: EmbedderConfig = field(default_factory=EmbedderConfig)
    chunker: ChunkerConfig = field(default_factory=ChunkerConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    summarizer: SummarizerConfig = field(default_factory=SummarizerConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Build a config from the parsed YAML mapping.

        Raises:
            ConfigurationError: If a section or value has the wrong type
        """
        embedder = _section(data, "embedder")
        chunker = _section(data, "chunker")
        store = _section(data, "vector_store")
        summarizer = _section(data, "summarizer")

        remote = None
        if "remote" in embedder or "openai" in embedder:
            raw = _section(embedder, "remote" if "remote" in embedder else "openai")
            defaults = RemoteEmbedderConfig()
            remote = RemoteEmbedderConfig(
                base_url=str(raw.get("base_url") or defaults.base_url),
                api_key_env=str(raw.get("api_key_env") or defaults.api_key_env),
                model=str(raw.get("model") or defaults.model),
                timeout_seconds=_number(raw, "timeout_secs", defaults.timeout_seconds),
            )

        qdrant = None
        if "qdrant" in store:
            raw = _section(store, "qdrant")
            defaults = QdrantConfig()
            qdrant = QdrantConfig(
                url=str(raw.get("url") or defaults.url),
                api_key=str(raw.get("api_key") or ""),
                collection=str(raw.get("collection") or defaults.collection),
                timeout_seconds=_number(raw, "timeout_secs", defaults.timeout_seconds),
            )

        sentences_per_chunk = int(_number(chunker, "sentences_per_chunk", 5))
        if sentences_per_chunk == 0:
            sentences_per_chunk = 5

        return cls(
            embedder=EmbedderConfig(type=str(embedder.get("type") or "tfidf"), remote=remote),
            chunker=ChunkerConfig(
                type=str(chunker.get("type") or "sentence"),
                sentences_per_chunk=sentences_per_chunk,
                overlap_sentences=int(_number(chunker, "overlap_sentences", 1)),
            ),
            vector_store=VectorStoreConfig(type=str(store.get("type") or "memory"), qdrant=qdrant),
            summarizer=SummarizerConfig(
                type=str(summarizer.get("type") or "frequency"),
                max_sentences=int(_number(summarizer, "max_sentences", 5)),
            ),
        )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"config section '{key}' must be a mapping")
    return value


def _number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"config value '{key}' must be a number, got {value!r}")
    return value


def resolve_config_path(path: str | Path | None = None) -> Optional[Path]:
    """Pick the config file to load.

    Order: explicit path, $RAGSEARCH_CONFIG, ~/.config/ragsearch/config.yaml.
    Returns None when only the default location applies and it does not exist.
    """
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML, falling back to defaults.

    Args:
        path: Optional explicit config file

    Returns:
        Loaded configuration with environment overrides applied

    Raises:
        ConfigurationError: If the chosen file is missing or malformed
    """
    config_path = resolve_config_path(path)
    if config_path is None:
        logger.debug("No config file found, using defaults")
        config = AppConfig()
    else:
        config = AppConfig.from_dict(_read_yaml(config_path))

    _apply_env_overrides(config)
    return config


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    logger.info(f"Loading config from: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config {config_path} must contain a mapping")
    return data


def _apply_env_overrides(config: AppConfig) -> None:
    """Apply environment variable overrides to a loaded config."""
    embedder_type = os.environ.get("RAGSEARCH_EMBEDDER")
    if embedder_type:
        config.embedder.type = embedder_type

    store_type = os.environ.get("RAGSEARCH_VECTOR_STORE")
    if store_type:
        config.vector_store.type = store_type

    qdrant_url = os.environ.get("RAGSEARCH_QDRANT_URL")
    if qdrant_url:
        if config.vector_store.qdrant is None:
            config.vector_store.qdrant = QdrantConfig()
        config.vector_store.qdrant.url = qdrant_url
