"""Configuration loading for people-log."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

import yaml
from loguru import logger

from .schemas import PeopleLogError


CONFIG_PATH = ".config/people/config.yaml"
PER_PERSON_DIR = "per-person-logs"


class ConfigError(PeopleLogError):
    """The configuration file is missing or cannot be understood."""


def _resolve_path(raw_path: str, base_dir: Path) -> str:
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    return [str(item) for item in value]


@dataclass
class PersonProfile:
    """Optional per-person details kept in the config file."""

    name: str
    location: Optional[str] = None
    themes: List[str] = field(default_factory=list)
    remind_after: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersonProfile":
        if not isinstance(data, dict) or not data.get("name"):
            raise ConfigError(f"person entry needs a name, got {data!r}")
        remind_after = data.get("remind_after")
        return cls(
            name=str(data["name"]).strip(),
            location=data.get("location"),
            themes=_string_list(data, "themes"),
            remind_after=str(remind_after) if remind_after is not None else None,
        )


@dataclass
class AppConfig:
    """Top-level app configuration."""

    people_dir: str
    ignore: FrozenSet[str] = frozenset()
    people: List[PersonProfile] = field(default_factory=list)

    @property
    def per_person_dir(self) -> str:
        return str(Path(self.people_dir) / PER_PERSON_DIR)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "AppConfig":
        """Build config from a dictionary."""
        base = Path.cwd() if base_dir is None else base_dir

        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping")
        people_dir = data.get("people_dir")
        if not people_dir:
            raise ConfigError("'people_dir' is required")

        people_data = data.get("people") or []
        if not isinstance(people_data, list):
            raise ConfigError("'people' must be a list")

        return cls(
            people_dir=_resolve_path(str(people_dir), base),
            ignore=frozenset(name.strip() for name in _string_list(data, "ignore")),
            people=[PersonProfile.from_dict(item) for item in people_data],
        )

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """Load config from YAML."""
        config_path = Path(path).expanduser().resolve()
        if not config_path.exists():
            raise ConfigError(f"expected file at {config_path}, but it does not exist")
        try:
            with config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            logger.debug("Failed to parse config file, reason: {!r}", exc)
            raise ConfigError(f"failed to parse because {exc}") from exc
        return cls.from_dict(data, base_dir=config_path.parent)


def default_config_path() -> Path:
    home = os.environ.get("HOME")
    if not home:
        raise ConfigError("HOME not found")
    return Path(home) / CONFIG_PATH


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load the user's config, falling back to `~/.config/people/config.yaml`."""
    config_path = Path(path) if path else default_config_path()
    logger.info("Loading config from {}", config_path)
    return AppConfig.from_yaml(str(config_path))
