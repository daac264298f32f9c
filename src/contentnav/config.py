"""Configuration for contentnav.

Settings live in a ``contentnav.toml`` file that is either passed
explicitly or discovered in the working directory or one of its parents.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from contentnav.exceptions import ConfigError

CONFIG_FILENAME = "contentnav.toml"

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.mdx", "**/*.yml", "**/*.yaml", "**/*.json"]


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content tree location and locale settings."""

    source_dir: Path = field(default_factory=lambda: Path("."))
    default_locale: str = "en"
    supported_locales: list[str] = field(default_factory=lambda: ["en"])
    i18n_include_in_paths: bool = False


@dataclass
class LiveReloadConfig:
    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from an explicit or discovered file.

        Without config_path, contentnav.toml is looked up from the current
        directory upward. Missing files and sections fall back to defaults.

        Args:
            config_path: Optional explicit path to a config file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If an explicit config_path doesn't exist
            ConfigError: If the file is not valid TOML or a value has the wrong type
        """
        if config_path is None:
            config_path = cls._discover_config()
            if config_path is None:
                return cls(server=ServerConfig(), content=ContentConfig(), live_reload=LiveReloadConfig())
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

        return cls(
            server=_parse_server(_section(data, "server")),
            content=_parse_content(_section(data, "content"), config_path.parent),
            live_reload=_parse_live_reload(_section(data, "live_reload")),
            config_path=config_path,
        )

    @classmethod
    def _discover_config(cls) -> Path | None:
        for directory in (Path.cwd(), *Path.cwd().parents):
            candidate = directory / CONFIG_FILENAME
            if candidate.exists():
                return candidate
        return None

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Return a copy with command line overrides applied.

        None means "keep the configured value". The original Config is not
        modified.
        """
        server_changes: dict[str, Any] = {}
        if host is not None:
            server_changes["host"] = host
        if port is not None:
            server_changes["port"] = port

        content = self.content if source_dir is None else replace(self.content, source_dir=source_dir)
        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=replace(self.server, **server_changes),
            content=content,
            live_reload=live_reload,
        )


_KIND_NAMES = {str: "a string", int: "an integer", bool: "a boolean"}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"{name} section must be a dictionary")
    return section


def _read(section: dict[str, Any], prefix: str, key: str, kind: type, default: Any) -> Any:
    """Read one typed value; bools never count as integers."""
    value = section.get(key, default)
    if isinstance(value, bool) and kind is not bool:
        value_ok = False
    else:
        value_ok = isinstance(value, kind)
    if not value_ok:
        raise ConfigError(f"{prefix}.{key} must be {_KIND_NAMES[kind]}")
    return value


def _read_strings(section: dict[str, Any], prefix: str, key: str) -> list[str] | None:
    values = section.get(key)
    if values is None:
        return None
    if not isinstance(values, list):
        raise ConfigError(f"{prefix}.{key} must be a list")
    if not all(isinstance(value, str) for value in values):
        raise ConfigError(f"{prefix}.{key} items must be strings")
    return list(values)


def _parse_server(section: dict[str, Any]) -> ServerConfig:
    return ServerConfig(
        host=_read(section, "server", "host", str, "127.0.0.1"),
        port=_read(section, "server", "port", int, 8080),
    )


def _parse_content(section: dict[str, Any], config_dir: Path) -> ContentConfig:
    """Parse the [content] section.

    source_dir is resolved against the directory holding the config file.
    The default locale is always part of the supported locales.
    """
    source_dir = _read(section, "content", "source_dir", str, ".")

    default_locale = _read(section, "content", "default_locale", str, "en").lower()
    if len(default_locale) != 2:
        raise ConfigError("content.default_locale must be a two letter code")

    supported = [locale.lower() for locale in _read_strings(section, "content", "supported_locales") or []]
    if default_locale not in supported:
        supported.insert(0, default_locale)

    return ContentConfig(
        source_dir=config_dir / source_dir,
        default_locale=default_locale,
        supported_locales=supported,
        i18n_include_in_paths=_read(section, "content", "i18n_include_in_paths", bool, False),
    )


def _parse_live_reload(section: dict[str, Any]) -> LiveReloadConfig:
    return LiveReloadConfig(
        enabled=_read(section, "live_reload", "enabled", bool, True),
        watch_patterns=_read_strings(section, "live_reload", "watch_patterns"),
    )
