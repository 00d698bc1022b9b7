"""
Application Configuration.

Server and storage settings. Values come from the environment (and a
``.env`` file when present) once at startup and are then passed explicitly
to ``create_app`` and ``create_store``.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from transformation.errors import ConfigurationError

StorageBackend = Literal["memory", "sqlite"]

STORAGE_BACKENDS = ("memory", "sqlite")

# Relative to the working directory the server is started from
DEFAULT_DB_PATH = Path("State") / "transformation.db"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=5000, description="API server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Allowed CORS origins"
    )


class StorageConfig(BaseModel):
    """Record store selection."""

    backend: StorageBackend = Field(default="sqlite", description="memory or sqlite")
    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")


class Config(BaseModel):
    """Complete application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """
        Build configuration from environment variables.

        Args:
            env_file: Optional .env file to load before reading the environment

        Returns:
            Config populated from the environment with defaults for the rest

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        load_dotenv(env_file)

        backend = os.getenv("STORAGE_BACKEND", "sqlite").strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend '{backend}'. "
                f"Must be one of: {', '.join(STORAGE_BACKENDS)}"
            )

        port = os.getenv("TRANSFORMATION_PORT", "5000")
        try:
            port_number = int(port)
        except ValueError:
            raise ConfigurationError(f"Invalid port '{port}'")

        db_path = os.getenv("DATABASE_PATH")

        return cls(
            server=ServerConfig(
                host=os.getenv("TRANSFORMATION_HOST", "0.0.0.0"),
                port=port_number,
                debug=os.getenv("DEBUG", "false").lower() == "true",
                log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
                cors_origins=_parse_cors_origins(),
            ),
            storage=StorageConfig(
                backend=backend,
                db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
            ),
        )


def _parse_cors_origins() -> list[str]:
    origins = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]
