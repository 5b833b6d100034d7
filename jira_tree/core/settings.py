"""Load connection and display settings from YAML with environment overrides.

The config file lives at ``$XDG_CONFIG_HOME/jira-tree/config.yaml`` (falling
back to ``~/.config/jira-tree/config.yaml``) and looks like::

    jira:
      server: https://example.atlassian.net
      email: me@example.com
      token: ...
    tree:
      depth: 3
      verbose: false
      timezone: America/Santiago

``JIRA_TREE_SERVER``, ``JIRA_TREE_EMAIL``, ``JIRA_TREE_TOKEN``,
``JIRA_TREE_DEPTH``, ``JIRA_TREE_VERBOSE`` and ``JIRA_TREE_TIMEZONE`` win over
the file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import pytz
import yaml

from .config import DEFAULT_TREE_DEPTH

ENV_PREFIX = "JIRA_TREE_"
CONFIG_DIR_NAME = "jira-tree"
CONFIG_FILE_NAME = "config.yaml"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class JiraSettings:
    server: str = ""
    email: str = ""
    token: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.server and self.email and self.token)


@dataclass(slots=True)
class TreeSettings:
    depth: int = DEFAULT_TREE_DEPTH
    verbose: bool = False
    timezone: str | None = None


@dataclass(slots=True)
class Settings:
    jira: JiraSettings
    tree: TreeSettings


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ValueError(f"failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")
    return data


def _section(data: dict, name: str, path: Path) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"config file {path}: '{name}' must be a mapping, got {type(section).__name__}")
    return section


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def load_settings(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    config_path = Path(path) if path else default_config_path(env)
    data = _read_yaml(config_path)
    jira_section = _section(data, "jira", config_path)
    tree_section = _section(data, "tree", config_path)

    jira = JiraSettings(
        server=env.get(f"{ENV_PREFIX}SERVER") or jira_section.get("server") or "",
        email=env.get(f"{ENV_PREFIX}EMAIL") or jira_section.get("email") or "",
        token=env.get(f"{ENV_PREFIX}TOKEN") or jira_section.get("token") or "",
    )

    depth_value = env.get(f"{ENV_PREFIX}DEPTH", tree_section.get("depth", DEFAULT_TREE_DEPTH))
    try:
        depth = int(depth_value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"tree depth must be an integer, got {depth_value!r}") from exc

    verbose_value = env.get(f"{ENV_PREFIX}VERBOSE", tree_section.get("verbose", False))
    timezone = env.get(f"{ENV_PREFIX}TIMEZONE") or tree_section.get("timezone") or None
    if timezone:
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"unknown timezone {timezone!r}") from exc

    return Settings(
        jira=jira,
        tree=TreeSettings(depth=depth, verbose=_as_bool(verbose_value), timezone=timezone),
    )
