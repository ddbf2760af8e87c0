"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database path settings."""

    model_config = SettingsConfigDict(env_prefix="KINSHIP_DB_")

    graph_db_path: str = "data/kinship.db"
    busy_timeout: float = 5.0

    def ensure_dirs(self) -> None:
        """Create data directory if needed."""
        Path(self.graph_db_path).parent.mkdir(parents=True, exist_ok=True)


class GraphSettings(BaseSettings):
    """Relationship graph behaviour."""

    model_config = SettingsConfigDict(env_prefix="KINSHIP_GRAPH_")

    # block: refuse to delete a type while edges use it
    # cascade: delete the referencing edge pairs with the type
    type_deletion_policy: Literal["block", "cascade"] = "block"
    verify_classification: bool = True


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="KINSHIP_LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["keyvalue", "json"] = "keyvalue"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database: DatabaseSettings = DatabaseSettings()
    graph: GraphSettings = GraphSettings()
    logging: LoggingSettings = LoggingSettings()


settings = Settings()
