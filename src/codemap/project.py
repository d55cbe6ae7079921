"""Project-local state: the ``.codemap/`` directory and its config file."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from .errors import CodemapError
from .models import MapConfig

logger = logging.getLogger(__name__)

CODEMAP_DIR = ".codemap"
CONFIG_FILE = "config.toml"


def config_path(root: Path) -> Path:
    return root / CODEMAP_DIR / CONFIG_FILE


def load_config(root: Path) -> MapConfig:
    """Load ``.codemap/config.toml`` under *root*, or defaults if absent.

    Raises :class:`CodemapError` when the file exists but is malformed.
    """
    path = config_path(root)
    if not path.is_file():
        return MapConfig()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise CodemapError(f"cannot read {path}: {exc}") from exc
    try:
        cfg = MapConfig.model_validate(data)
    except ValidationError as exc:
        raise CodemapError(f"invalid config in {path}: {exc}") from exc
    logger.debug("Loaded config from %s", path)
    return cfg


def cache_dir(root: Path, cfg: MapConfig) -> Path:
    """Absolute directory where synthesized extractors live."""
    path = Path(cfg.cache_dir)
    return path if path.is_absolute() else root / path
