"""Application configuration for chipsim."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Self

from chipsim.core.rules import DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND, DEFAULT_BUY_IN


@dataclass
class TableConfig:
    """Defaults offered when setting up a game."""

    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    buy_in: int = DEFAULT_BUY_IN


@dataclass
class StorageConfig:
    """Where the table is saved between sessions."""

    enabled: bool = True
    directory: str = "~/.local/share/chipsim"


@dataclass
class ServerConfig:
    """Settings for the HTTP service."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


@dataclass
class Config:
    """Application configuration."""

    table: TableConfig = field(default_factory=TableConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Self:
        """Load config from file, falling back to defaults."""
        if path is None:
            path = os.environ.get("CHIPSIM_CONFIG")
        if path:
            return cls._from_file(Path(path))

        config_paths = [
            Path.cwd() / "chipsim.toml",
            Path.cwd() / ".chipsim.toml",
            Path.home() / ".config" / "chipsim" / "config.toml",
            Path.home() / ".chipsim.toml",
        ]

        for config_path in config_paths:
            if config_path.exists():
                return cls._from_file(config_path)

        return cls()

    @classmethod
    def _from_file(cls, path: Path) -> Self:
        """Load config from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)

        table_data = data.get("table", {})
        table = TableConfig(
            small_blind=table_data.get("small_blind", DEFAULT_SMALL_BLIND),
            big_blind=table_data.get("big_blind", DEFAULT_BIG_BLIND),
            buy_in=table_data.get("buy_in", DEFAULT_BUY_IN),
        )

        storage_data = data.get("storage", {})
        storage = StorageConfig(
            enabled=storage_data.get("enabled", True),
            directory=storage_data.get("directory", "~/.local/share/chipsim"),
        )

        server_data = data.get("server", {})
        server = ServerConfig(
            host=server_data.get("host", "127.0.0.1"),
            port=server_data.get("port", 8000),
            log_level=str(server_data.get("log_level", "INFO")).upper(),
        )

        return cls(table=table, storage=storage, server=server)


# Global config instance (loaded lazily)
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config
