"""Test settings loading from the environment."""

import pytest
from pydantic import ValidationError

from kinship.config import DatabaseSettings, GraphSettings, Settings


def test_defaults():
    graph = GraphSettings()
    assert graph.type_deletion_policy == "block"
    assert graph.verify_classification is True


def test_env_override(monkeypatch):
    monkeypatch.setenv("KINSHIP_GRAPH_TYPE_DELETION_POLICY", "cascade")
    monkeypatch.setenv("KINSHIP_DB_BUSY_TIMEOUT", "1.5")

    assert GraphSettings().type_deletion_policy == "cascade"
    assert DatabaseSettings().busy_timeout == 1.5


def test_invalid_policy_rejected(monkeypatch):
    monkeypatch.setenv("KINSHIP_GRAPH_TYPE_DELETION_POLICY", "ignore")
    with pytest.raises(ValidationError):
        GraphSettings()


def test_nested_defaults():
    settings = Settings()
    assert settings.database.graph_db_path.endswith(".db")
    assert settings.logging.level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
