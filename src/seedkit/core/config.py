"""Configuration for seedkit.

Configuration is stored as JSON in ~/.seedkit/config.json. The location can
be overridden with the SEEDKIT_CONFIG environment variable or an explicit
path. Every value has a default, so a missing file is never an error.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, List, Optional

from filelock import FileLock

from seedkit.errors import SeedkitError

logger = logging.getLogger(__name__)

CONFIG_ENV = "SEEDKIT_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.seedkit/config.json")


class ConfigError(SeedkitError):
    """A configuration value has the wrong type."""
    pass


@dataclass
class SeedConfig:
    """Configuration for seedkit (stored in ~/.seedkit/config.json)."""
    # Template repository, as "host/org/name"
    repository: str = "github.com/padraicbc/ponzu"
    dev_branch: str = "ponzu-dev"

    # Workspace root discovery
    workspace_env: str = "GOPATH"
    default_workspace_dir: str = "go"  # relative to the user's home

    # External tools
    clone_command: List[str] = field(default_factory=lambda: ["git", "clone"])
    module_init_command: List[str] = field(default_factory=lambda: ["go", "mod", "init"])
    clone_timeout_seconds: Optional[int] = 600
    module_init_timeout_seconds: Optional[int] = 120

    # Materialization
    module_file: str = "go.mod"
    removed_artifacts: List[str] = field(
        default_factory=lambda: [".git", ".circleci", "go.mod", "go.sum"]
    )
    override_module: str = "github.com/padraicbc/ponzu/dynamic/content"
    override_version: str = "v0.0.0"
    override_path: str = "./dynamic/content"

    # Vendoring
    vendor_packages: List[str] = field(
        default_factory=lambda: ["content", "management", "system"]
    )
    vendor_dir: str = "cmd/ponzu/vendor/github.com/padraicbc/ponzu"
    user_content_dir: str = "content"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SeedConfig":
        """Build from a dict. Unknown keys are ignored; invalid values fall back to defaults."""
        values = {}
        for k, v in data.items():
            if k not in cls.__dataclass_fields__:
                continue
            try:
                check_value(k, v)
            except ConfigError as e:
                logger.warning("%s. Using default.", e)
                continue
            values[k] = v
        return cls(**values)


def check_value(key: str, value: Any) -> None:
    """Check ``value`` against the declared type of field ``key``.

    Raises:
        ConfigError: If the value does not fit the field
    """
    expected = SeedConfig.__dataclass_fields__[key].type
    if expected is str:
        ok = isinstance(value, str)
    elif expected == List[str]:
        ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        # a command needs at least an executable
        if key.endswith("_command"):
            ok = ok and bool(value)
    elif expected == Optional[int]:
        ok = value is None or (isinstance(value, int) and not isinstance(value, bool) and value > 0)
    else:
        ok = True
    if not ok:
        raise ConfigError(f"Invalid value for '{key}': {value!r}")


def default_config_path() -> Path:
    """Resolve the config file location, honouring SEEDKIT_CONFIG."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


class ConfigManager:
    """Loads and saves seedkit configuration."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_config_path()
        self._config: Optional[SeedConfig] = None
        self._lock = FileLock(str(self.path) + ".lock", timeout=30)

    @property
    def config(self) -> SeedConfig:
        """Get configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> SeedConfig:
        """Load configuration from file, falling back to defaults."""
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text())
                self._config = SeedConfig.from_dict(data)
                return self._config
            except (json.JSONDecodeError, TypeError, AttributeError) as e:
                logger.warning("Config file %s is invalid: %s. Using defaults.", self.path, e)
        self._config = SeedConfig()
        return self._config

    def save(self) -> None:
        """Save configuration atomically (temp file + os.replace)."""
        config = self.config
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent),
                suffix=".tmp",
                prefix="config_",
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(config.to_dict(), f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, str(self.path))
            except Exception:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

    def update(self, **kwargs: Any) -> None:
        """Update configuration values and save.

        Raises:
            KeyError: If a key is not a configuration field
            ConfigError: If a value has the wrong type
        """
        for key in kwargs:
            if key not in SeedConfig.__dataclass_fields__:
                raise KeyError(key)
        for key, value in kwargs.items():
            check_value(key, value)
        for key, value in kwargs.items():
            setattr(self.config, key, value)
        self.save()
