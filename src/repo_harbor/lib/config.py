"""Configuration loading: CLI flags → env vars → defaults."""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from repo_harbor.lib.providers.xcode import DEFAULT_APP_DIR, DEFAULT_BUILD_COMMAND

logger = logging.getLogger(__name__)

ConfigValue = str | int | bool | Path | tuple[str, ...] | None

_TRUE_VALUES = ("1", "true", "yes")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in _TRUE_VALUES


def _load_env_files() -> None:
    """Load a dotenv file from the current working directory, if present."""
    load_dotenv(Path.cwd() / ".env", override=False)


def _parse_port(raw: ConfigValue) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"Invalid port {raw!r}")
    try:
        return int(str(raw))
    except ValueError as exc:
        raise ValueError(f"Invalid port {raw!r}: must be an integer") from exc


def _parse_command(raw: ConfigValue) -> tuple[str, ...]:
    if isinstance(raw, tuple):
        return raw
    return tuple(shlex.split(str(raw)))


@dataclass(frozen=True)
class Config:
    """Immutable application configuration."""

    storage_root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 3000
    verbose: bool = False
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    app_dir: str = DEFAULT_APP_DIR
    static_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate config fields on creation.

        Rejects ports outside 1-65535 and an empty build command. Logs a
        warning when ``storage_root`` does not exist yet; it is created on
        the first clone.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port {self.port}: must be in 1-65535")
        if not self.build_command:
            raise ValueError("build_command must be non-empty")
        if not self.storage_root.is_dir():
            logger.warning(
                "Storage root %s does not exist; it will be created on first clone",
                self.storage_root,
            )

    @classmethod
    def from_env(cls, overrides: dict[str, ConfigValue] | None = None) -> Config:
        """Build config from environment variables, then apply overrides.

        Priority: overrides (CLI flags) > env vars > defaults.
        """
        _load_env_files()

        env_values: dict[str, ConfigValue] = {
            "storage_root": os.environ.get("REPO_HARBOR_STORAGE_ROOT"),
            "host": os.environ.get("REPO_HARBOR_HOST"),
            "port": os.environ.get("REPO_HARBOR_PORT") or os.environ.get("PORT"),
            "verbose": _env_flag("REPO_HARBOR_VERBOSE"),
            "build_command": os.environ.get("REPO_HARBOR_BUILD_COMMAND"),
            "app_dir": os.environ.get("REPO_HARBOR_APP_DIR"),
            "static_dir": os.environ.get("REPO_HARBOR_STATIC_DIR"),
        }

        merged = {k: v for k, v in env_values.items() if v}
        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        storage_root = merged.get("storage_root")
        static_dir = merged.get("static_dir")
        return cls(
            storage_root=(
                Path(str(storage_root)).expanduser() if storage_root else Path.cwd()
            ),
            host=str(merged.get("host", cls.host)),
            port=_parse_port(merged.get("port", cls.port)),
            verbose=bool(merged.get("verbose", cls.verbose)),
            build_command=_parse_command(
                merged.get("build_command", DEFAULT_BUILD_COMMAND)
            ),
            app_dir=str(merged.get("app_dir", cls.app_dir)),
            static_dir=Path(str(static_dir)).expanduser() if static_dir else None,
        )
