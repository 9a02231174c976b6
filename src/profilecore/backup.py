"""Profile backups taken before any mutation.

One backup per profile: the profile path with its suffix swapped for
``.bak`` (``config.fish`` -> ``config.bak``; dotfiles without a suffix
such as ``.bashrc`` become ``.bashrc.bak``). Each backup overwrites
the previous one. There is no rotation.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from .errors import BackupError

logger = logging.getLogger("profilecore.backup")

BACKUP_SUFFIX = ".bak"


def backup_path_for(profile_path: Path) -> Path:
    """Where the backup of ``profile_path`` lives."""
    return profile_path.with_suffix(BACKUP_SUFFIX)


def backup_profile(profile_path: Path) -> Optional[Path]:
    """Copy a profile to its backup path, byte for byte.

    Args:
        profile_path: Profile file about to be modified.

    Returns:
        The backup path, or None when there was nothing to back up.

    Raises:
        BackupError: If the copy failed (permissions, disk space, ...).
    """
    if not profile_path.exists():
        logger.debug("No profile at %s, nothing to back up", profile_path)
        return None

    target = backup_path_for(profile_path)
    try:
        shutil.copyfile(profile_path, target)
    except OSError as exc:
        raise BackupError(profile_path, exc) from exc

    logger.info("Backed up %s to %s", profile_path, target)
    return target
