"""
The profilecore configuration directory and its config.yaml.

The directory defaults to ``~/.config/profilecore`` and can be moved
with ``PROFILECORE_CONFIG_DIR``. It is created lazily the first time an
install run needs it, at most once per run, and only ever removed when
the user explicitly asks during uninstall.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel

from . import CONFIG_DIR_ENV, __version__
from .shells import HostEnvironment

logger = logging.getLogger("profilecore.config")

CONFIG_FILE = "config.yaml"


class ReinstallMode(str, Enum):
    """What to do with an existing block when reinstalling."""

    REPLACE = "replace"
    APPEND = "append"


class InstallerConfig(BaseModel):
    """Persistent installer settings (config.yaml)."""

    reinstall_mode: ReinstallMode = ReinstallMode.REPLACE
    verify_after_install: bool = True


def get_config_dir(env: HostEnvironment) -> Path:
    """Resolve the configuration directory for this host.

    Raises:
        HomeDirectoryError: If no override is set and home is unknown.
    """
    override = env.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return env.require_home() / ".config" / "profilecore"


class ConfigDirectory:
    """Tracks the configuration directory across one install run."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ensured = False

    @classmethod
    def for_host(cls, env: HostEnvironment) -> "ConfigDirectory":
        return cls(get_config_dir(env))

    @property
    def config_file(self) -> Path:
        return self.path / CONFIG_FILE

    def exists(self) -> bool:
        return self.path.is_dir()

    def ensure(self) -> bool:
        """Create the directory (and a default config.yaml) if missing.

        Repeated calls are no-ops.

        Returns:
            True if the directory was created by this call.

        Raises:
            OSError: If the directory or config file cannot be written.
        """
        if self._ensured:
            return False

        created = not self.path.exists()
        self.path.mkdir(parents=True, exist_ok=True)
        if not self.config_file.exists():
            save_config(self.path, InstallerConfig())
        self._ensured = True

        if created:
            logger.info("Created config directory %s", self.path)
        return created

    def load(self) -> InstallerConfig:
        return load_config(self.path)

    def remove(self) -> bool:
        """Recursively delete the directory.

        Returns:
            True if something was deleted.

        Raises:
            OSError: If the delete failed.
        """
        if not self.path.exists():
            return False
        shutil.rmtree(self.path)
        self._ensured = False
        logger.info("Removed config directory %s", self.path)
        return True


def load_config(config_dir: Path) -> InstallerConfig:
    """Load config.yaml, falling back to defaults.

    Args:
        config_dir: The configuration directory.

    Returns:
        InstallerConfig from disk, or defaults when the file is
        missing or malformed.
    """
    config_file = config_dir / CONFIG_FILE
    if config_file.exists():
        try:
            data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
            return InstallerConfig(**data)
        except (yaml.YAMLError, ValueError, TypeError, OSError) as exc:
            logger.warning("Failed to load config: %s, using defaults", exc)
    return InstallerConfig()


def save_config(config_dir: Path, config: InstallerConfig) -> Path:
    """Write config.yaml into the configuration directory."""
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / CONFIG_FILE
    header = f"# profilecore {__version__} installer settings\n"
    config_file.write_text(
        header + yaml.safe_dump(config.model_dump(mode="json"), default_flow_style=False),
        encoding="utf-8",
    )
    return config_file
