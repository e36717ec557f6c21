"""Vault root, settings, and path helpers for Periodic PARA."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from periodic_para.fileio import read_yaml
from periodic_para.models import Settings

logger = logging.getLogger(__name__)


def vault_root() -> Path:
    """Get the vault root directory (contains the PARA folders and periodic notes)."""
    return Path(
        os.environ.get("PARA_VAULT_ROOT", str(Path.home() / "vault"))
    ).expanduser().resolve()


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = vault_root()
    return root / ".periodic-para" / "settings.yaml"


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml, falling back to defaults for anything missing."""
    path = settings_path(root)
    try:
        data = read_yaml(path)
    except Exception as e:
        logger.warning("Ignoring unreadable settings %s: %s", path, e)
        data = {}
    return Settings.from_dict(data)


def log_level() -> str:
    return os.environ.get("PARA_LOG_LEVEL", "WARNING").upper()
