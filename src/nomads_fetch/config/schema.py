"""YAML configuration schema and validation for NOMADS fetches."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from nomads_fetch.config.catalog import DEFAULT_CATALOG, Catalog

FetchBackend = Literal["tiny_retriever", "curl"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_BASE_DIR = Path("~/Downloads/gribs")
DEFAULT_WORKERS = 4
DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_TIMEOUT = 300
_BACKENDS = ("tiny_retriever", "curl")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _expand_path(value: Path | str) -> Path:
    """Expand ``~`` and ``$VAR`` references and make the path absolute."""
    return Path(os.path.expandvars(os.path.expanduser(str(value)))).resolve()


@dataclass
class FetchConfig:
    """Settings shared by every fetch invocation.

    Parameters
    ----------
    base_dir : Path
        Root of the download tree; runs live under ``<base_dir>/grb2``.
    workers : int
        Number of concurrent download workers.
    max_attempts : int
        Download attempts per forecast hour before it is marked bad.
    timeout : int
        Per-attempt download timeout in seconds.
    backend : {"tiny_retriever", "curl"}
        Transport used to retrieve a URL into a file.
    keep : bool
        Keep the per-forecast directory after a complete fetch.
    log_level : str
        Console log level.
    log_file : Path, optional
        Also log (at DEBUG) to this file.
    zones, models : dict
        Catalog entries added to, or merged over, the built-in tables.
    """

    base_dir: Path = field(default_factory=lambda: DEFAULT_BASE_DIR)
    workers: int = DEFAULT_WORKERS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    timeout: int = DEFAULT_TIMEOUT
    backend: FetchBackend = "tiny_retriever"
    keep: bool = False
    log_level: LogLevel = "INFO"
    log_file: Path | None = None
    zones: dict[str, dict[str, Any]] = field(default_factory=dict)
    models: dict[str, dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_dir = _expand_path(self.base_dir)
        if self.log_file is not None:
            self.log_file = _expand_path(self.log_file)

    @property
    def grb2_dir(self) -> Path:
        """Directory holding run directories and composite files."""
        return self.base_dir / "grb2"

    def build_catalog(self, base: Catalog = DEFAULT_CATALOG) -> Catalog:
        """Return the built-in catalog extended with this config's zones and models."""
        if not self.zones and not self.models:
            return base
        return base.extend(zones=self.zones, models=self.models)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors: list[str] = []
        for name, message in (
            ("workers", "workers must be at least 1"),
            ("max_attempts", "max_attempts must be at least 1"),
            ("timeout", "timeout must be positive"),
        ):
            value = getattr(self, name)
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
            elif value < 1:
                errors.append(message)
        if not isinstance(self.keep, bool):
            errors.append(f"keep must be true or false, got {self.keep!r}")
        if self.backend not in _BACKENDS:
            errors.append(f"backend must be one of {', '.join(_BACKENDS)}, got {self.backend!r}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}"
            )
        for name in ("zones", "models"):
            if not isinstance(getattr(self, name), dict):
                errors.append(f"{name} must be a mapping of names to entries")
        if errors:
            return errors

        try:
            catalog = self.build_catalog()
        except (TypeError, ValueError) as e:
            errors.append(f"Invalid catalog entry: {e}")
        else:
            for name in self.zones:
                zone = catalog.zones[name]
                if zone.model not in catalog.models:
                    errors.append(f"Zone {name!r} references unknown model {zone.model!r}")
        return errors

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> FetchConfig:
        """Create config from dictionary."""
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> FetchConfig:
        """Load configuration from a YAML file.

        Parameters
        ----------
        config_path : Path or str
            Path to YAML configuration file.

        Returns
        -------
        FetchConfig
            Loaded configuration.

        Raises
        ------
        FileNotFoundError
            If the configuration file does not exist.
        yaml.YAMLError
            If the YAML file is malformed.
        ValueError
            If the file is empty or has unknown keys.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            data = yaml.safe_load(config_path.read_text())
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            raise ValueError(f"Configuration file is empty: {config_path}")
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        return cls._from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "base_dir": str(self.base_dir),
            "workers": self.workers,
            "max_attempts": self.max_attempts,
            "timeout": self.timeout,
            "backend": self.backend,
            "keep": self.keep,
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
            "zones": self.zones,
            "models": self.models,
        }

    def to_yaml(self, path: Path | str) -> None:
        """Write configuration to YAML file.

        Parameters
        ----------
        path : Path or str
            Path to YAML output file. Parent directories will be created
            if they don't exist.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False))
