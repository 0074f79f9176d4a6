"""Where the embedded database file lives, and how it is seeded."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

BUNDLED_DIR = Path(__file__).resolve().parents[2] / "data"
SNAPSHOT_NAME = "lifebook.db"

_SERVERLESS_MARKERS = ("VERCEL", "AWS_LAMBDA_FUNCTION_NAME", "NETLIFY", "K_SERVICE")


def _writable(directory: Path) -> bool:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    return os.access(directory, os.W_OK)


def resolve_db_dir(configured: str = "", environ: Optional[Mapping[str, str]] = None) -> Path:
    """Pick the directory for the embedded file.

    Order: explicit setting, platform volume, temp dir on read-only or
    serverless hosts, then the bundled data directory.
    """
    env = os.environ if environ is None else environ
    explicit = configured or env.get("LIFEBOOK_DB_DIR") or env.get("DATABASE_DIR")
    if explicit:
        return Path(explicit)
    if env.get("RAILWAY_VOLUME_MOUNT_PATH"):
        return Path(env["RAILWAY_VOLUME_MOUNT_PATH"])
    if env.get("RENDER"):
        return Path("/data")
    serverless = any(env.get(marker) for marker in _SERVERLESS_MARKERS)
    if serverless or not _writable(BUNDLED_DIR):
        return Path(tempfile.gettempdir()) / "lifebook"
    return BUNDLED_DIR


def seed_from_snapshot(target: Path, snapshot: Optional[Path] = None) -> bool:
    """Copy the bundled snapshot over a missing or empty target file."""
    source = snapshot or BUNDLED_DIR / SNAPSHOT_NAME
    if not source.is_file() or source.resolve() == target.resolve():
        return False
    if target.exists() and target.stat().st_size > 0:
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    logger.info("Seeded embedded database %s from %s", target, source)
    return True


def resolve_db_path(configured_dir: str, filename: str, *, seed: bool = True) -> Path:
    directory = resolve_db_dir(configured_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # Startup continues; the first embedded operation reports the failure with a hint.
        logger.warning("Could not create embedded database directory %s: %s", directory, exc)
    path = directory / filename
    if seed:
        try:
            seed_from_snapshot(path)
        except OSError as exc:
            logger.warning("Could not seed embedded database %s: %s", path, exc)
    return path


def diagnose(path: Path, exc: Optional[BaseException]) -> str:
    """Short operator hint for an embedded-store failure."""
    text = str(exc or "").lower()
    directory = path.parent
    if not directory.exists():
        return f"directory {directory} does not exist; set LIFEBOOK_DB_DIR to a writable path"
    if "readonly" in text or "read-only" in text or not os.access(directory, os.W_OK):
        return f"{directory} is read-only; set LIFEBOOK_DB_DIR to a writable path"
    if "locked" in text or "busy" in text:
        return f"{path.name} is locked by another writer; retry or raise SECONDARY_BUSY_TIMEOUT"
    if "unable to open" in text:
        return f"cannot open {path}; check the path and file permissions"
    return f"embedded store at {path} failed"
