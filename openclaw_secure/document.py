"""Reading and writing the OpenClaw config document (openclaw.json).

Writes go through a temp file in the same directory and ``os.replace``, so a
reader never sees a half-written config. The file's permission bits are kept,
and the previous content is copied to ``<path>.bak`` first.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Any

from openclaw_secure.errors import NotFoundError, OpenclawSecureError, ParseError

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o600


def expand_path(file_path: str | Path) -> Path:
    """Expand ``~`` and return an absolute path."""
    return Path(file_path).expanduser().resolve()


def read_config(config_path: str | Path) -> dict[str, Any]:
    """Load the config as a dict. Raises NotFoundError or ParseError."""
    full_path = expand_path(config_path)
    try:
        content = full_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise NotFoundError(f"Config file not found: {full_path}") from None
    except OSError as e:
        raise OpenclawSecureError(f"Failed to read config at {full_path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Config at {full_path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"Config at {full_path} must be a JSON object")
    return data


def backup_config(config_path: str | Path) -> Path:
    """Copy the config to ``<path>.bak``. Returns the backup path."""
    full_path = expand_path(config_path)
    backup_path = full_path.with_name(full_path.name + ".bak")
    try:
        shutil.copy2(full_path, backup_path)
    except OSError as e:
        raise OpenclawSecureError(f"Failed to create backup at {backup_path}: {e}") from e
    return backup_path


def _file_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except OSError:
        return DEFAULT_MODE


def write_config(
    config_path: str | Path,
    data: dict[str, Any],
    *,
    create_backup: bool = True,
) -> None:
    """Atomically replace the config with ``data``, keeping its permissions."""
    full_path = expand_path(config_path)
    mode = _file_mode(full_path)

    if create_backup and full_path.exists():
        try:
            backup_config(full_path)
        except OpenclawSecureError as e:
            logger.warning("Config backup skipped: %s", e)

    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    full_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=full_path.parent, prefix=f".{full_path.name}-", suffix=".tmp")
    try:
        os.write(fd, content.encode("utf-8"))
        os.close(fd)
        os.chmod(tmp, mode)
        os.replace(tmp, full_path)
    except OSError as e:
        try:
            os.close(fd)
        except OSError:
            pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise OpenclawSecureError(f"Failed to write config at {full_path}: {e}") from e
    logger.debug("Wrote config %s (mode %o)", full_path, mode)
