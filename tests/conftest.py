"""
Shared test fixtures and configuration for pytest.
"""

from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest

from ragsearch.models import Chunk


# ============================================================================
# Helpers
# ============================================================================

def make_response(status_code: int = 200, json_data=None, headers=None, json_error=None):
    """Build a MagicMock that quacks like requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data if json_data is not None else {}
    return response


def make_chunk(text: str, index: int = 0, document_id: str = "doc") -> Chunk:
    return Chunk(
        document_id=document_id,
        chunk_id=f"{document_id}:{index}",
        text=text,
        index=index,
    )


def unit(vector) -> np.ndarray:
    arr = np.asarray(vector, dtype=np.float64)
    return arr / np.linalg.norm(arr)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """A directory with two small .txt files and one non-text file."""
    (tmp_path / "animals.txt").write_text(
        "The cat sat on the mat. The dog ran fast in the park. "
        "Birds sing in the morning.",
        encoding="utf-8",
    )
    (tmp_path / "space.TXT").write_text(
        "Rockets launch into orbit. Astronauts train for years! "
        "Is the moon made of cheese?",
        encoding="utf-8",
    )
    (tmp_path / "notes.md").write_text("Markdown is ignored.", encoding="utf-8")
    return tmp_path


@pytest.fixture
def api_key(monkeypatch) -> str:
    """Provide an API key for the remote embedder."""
    monkeypatch.setenv("TEST_EMBED_KEY", "sk-test")
    return "sk-test"


@pytest.fixture(autouse=True)
def isolated_config_env(monkeypatch, tmp_path):
    """Keep user config files, .env files and overrides out of tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "RAGSEARCH_CONFIG",
        "RAGSEARCH_EMBEDDER",
        "RAGSEARCH_VECTOR_STORE",
        "RAGSEARCH_QDRANT_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(
        "ragsearch.config.DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yaml"
    )
