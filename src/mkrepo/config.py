from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog
import yaml

from mkrepo.git import CONFIG_KEY_MISSING, GitClient
from mkrepo.paths import expand_home

logger = structlog.get_logger(__name__)

SERVICE_KEY = "mkrepo.service"
ROOT_KEY = "ghq.root"
USER_NAME_KEY = "user.name"
AUTHOR_ALIAS_KEY = "mkrepo.username"
TEMPLATE_DIR_KEY = "mkrepo.templatedir"

CONFIG_FILE_ENV = "MKREPO_CONFIG"
DEFAULT_CONFIG_FILE = Path("~/.config/mkrepo/config.yaml")


class ConfigError(RuntimeError):
    pass


class ParseError(ConfigError):
    pass


class BackendExecutionError(ConfigError):
    pass


class NotFoundDefaultServiceSetting(ConfigError):
    def __init__(self) -> None:
        super().__init__(
            f"Missing '{SERVICE_KEY}' setting. "
            f"Run 'git config --global {SERVICE_KEY} github.com'."
        )


class UnsupportedHomeExpansion(ParseError):
    pass


@dataclass(frozen=True)
class Config:
    default_service: str
    user_name: str | None = None
    root_path: Path | None = None
    default_author_alias: str | None = None
    template_dir: Path | None = None


class ConfigStore(Protocol):
    def get(self, key: str) -> str | None: ...


class GitConfigStore:
    def __init__(self, git: GitClient | None = None) -> None:
        self.git = git or GitClient()

    def get(self, key: str) -> str | None:
        result = self.git.config_get(key)
        if result.returncode == CONFIG_KEY_MISSING:
            return None
        if not result.ok:
            raise BackendExecutionError(
                f"git config --get {key} failed: {result.detail}"
            )
        lines = result.stdout.splitlines()
        if len(lines) > 1:
            raise ParseError(f"Unexpected multi-line value for '{key}'.")
        value = lines[0].strip() if lines else ""
        return value or None


class EnvironmentStore:
    """Looks up ``ghq.root`` as ``GHQ_ROOT`` and ``mkrepo.*`` as ``MKREPO_*``."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = os.environ if environ is None else environ

    def get(self, key: str) -> str | None:
        name = _environment_name(key)
        if name is None:
            return None
        return self.environ.get(name) or None


class YamlFileStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: Mapping[str, Any] | None = None

    def get(self, key: str) -> str | None:
        node: Any = self._load()
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        if node is None or isinstance(node, (Mapping, list)):
            return None
        return str(node)

    def _load(self) -> Mapping[str, Any]:
        if self._data is not None:
            return self._data
        if not self.path.is_file():
            self._data = {}
            return self._data
        try:
            loaded = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ParseError(f"{self.path}: invalid YAML: {exc}") from exc
        except OSError as exc:
            raise BackendExecutionError(f"{self.path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, Mapping):
            raise ParseError(f"{self.path}: configuration must be a mapping.")
        self._data = loaded
        return self._data


class ChainedStore:
    def __init__(self, *stores: ConfigStore) -> None:
        self.stores = stores

    def get(self, key: str) -> str | None:
        for store in self.stores:
            value = store.get(key)
            if value is not None:
                return value
        return None


class ConfigResolver:
    def __init__(self, store: ConfigStore, home: Path | None = None) -> None:
        self.store = store
        self.home = home

    def resolve(self) -> Config:
        service = self.store.get(SERVICE_KEY)
        if not service:
            raise NotFoundDefaultServiceSetting()
        config = Config(
            default_service=service,
            user_name=self.store.get(USER_NAME_KEY),
            root_path=self._path_setting(ROOT_KEY),
            default_author_alias=self.store.get(AUTHOR_ALIAS_KEY),
            template_dir=self._path_setting(TEMPLATE_DIR_KEY),
        )
        logger.debug("resolved configuration", config=config)
        return config

    def _path_setting(self, key: str) -> Path | None:
        value = self.store.get(key)
        if not value:
            return None
        try:
            path = expand_home(value, self._home())
        except ValueError as exc:
            raise UnsupportedHomeExpansion(f"'{key}': {exc}") from exc
        if not path.is_absolute():
            path = Path(os.path.abspath(path))
        return path

    def _home(self) -> Path:
        return self.home if self.home is not None else Path.home()


def default_store(environ: Mapping[str, str] | None = None) -> ConfigStore:
    env = os.environ if environ is None else environ
    config_file = Path(env.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE).expanduser()
    return ChainedStore(
        EnvironmentStore(env),
        GitConfigStore(),
        YamlFileStore(config_file),
    )


def resolve_config(
    store: ConfigStore | None = None, home: Path | None = None
) -> Config:
    return ConfigResolver(store or default_store(), home=home).resolve()


def _environment_name(key: str) -> str | None:
    if key == ROOT_KEY:
        return "GHQ_ROOT"
    section, _, name = key.partition(".")
    if section != "mkrepo" or not name:
        return None
    return f"MKREPO_{name.replace('.', '_').upper()}"
