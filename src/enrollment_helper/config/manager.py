"""Configuration loader for the optional ``--config`` TOML file."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from enrollment_helper.config.defaults import DEFAULT_CONFIG
from enrollment_helper.config.schema import EnrollmentConfig
from enrollment_helper.errors import ConfigError

logger = logging.getLogger(__name__)


class ConfigManager:
    """Locates and reads the Enrollment Helper config file.

    Unlike most tools there is no default config location: a file is only
    read when one is passed explicitly.  Without one, :meth:`load` returns
    an :class:`EnrollmentConfig` populated entirely from defaults.

    Args:
        config_path: Path to a TOML config file, or ``None``.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def load(self) -> EnrollmentConfig:
        """Load configuration, falling back to defaults when no file was given.

        Returns:
            Fully populated :class:`EnrollmentConfig` instance.

        Raises:
            ConfigError: The file was given but cannot be read, is not
                valid TOML, or does not validate.
        """
        if self._config_path is None:
            return EnrollmentConfig()

        path = self._config_path.expanduser()
        try:
            with open(path, "rb") as fh:
                raw = tomllib.load(fh)
        except OSError as exc:
            raise ConfigError(f"Cannot read config file: {exc}", path=str(path)) from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file: {exc}", path=str(path)) from exc

        merged = _deep_merge(DEFAULT_CONFIG, raw)
        try:
            config = EnrollmentConfig(**merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}", path=str(path)) from exc

        logger.debug("Config loaded from %s", path)
        return config


def _deep_merge(base: dict[str, object], override: dict[str, object]) -> dict[str, object]:
    """Recursively merge *override* into a copy of *base*.

    Keys in *override* take precedence.  Nested dicts are merged rather
    than replaced so that partial TOML sections work correctly.
    """
    merged: dict[str, object] = {}
    for key in {*base, *override}:
        base_val = base.get(key)
        over_val = override.get(key)
        if isinstance(base_val, dict) and isinstance(over_val, dict):
            merged[key] = _deep_merge(base_val, over_val)  # type: ignore[arg-type]
        elif key in override:
            merged[key] = over_val
        else:
            merged[key] = base_val
    return merged
