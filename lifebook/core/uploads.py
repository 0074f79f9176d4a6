"""Upload storage on the local filesystem; only metadata reaches the database."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from lifebook.core.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    original_name: str
    stored_name: str
    path: Path
    size_bytes: int
    mime_type: Optional[str]

    def metadata(self) -> dict:
        return {
            "original_name": self.original_name,
            "stored_name": self.stored_name,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
        }


def upload_root(subdir: str) -> Path:
    root = Path(current_app.config["UPLOAD_FOLDER"]) / subdir
    root.mkdir(parents=True, exist_ok=True)
    return root


def save_upload(file_storage: Optional[FileStorage], subdir: str) -> StoredFile:
    if file_storage is None or not file_storage.filename:
        raise ValidationFailed("file", "No file uploaded")
    original = file_storage.filename
    safe_name = secure_filename(original) or "upload"
    extension = safe_name.rsplit(".", 1)[-1].lower() if "." in safe_name else ""
    allowed = current_app.config.get("UPLOAD_ALLOWED_EXTENSIONS") or set()
    if allowed and extension not in allowed:
        raise ValidationFailed("file", f"File type .{extension or '?'} is not allowed")
    stored_name = f"{uuid.uuid4().hex}_{safe_name}"
    path = upload_root(subdir) / stored_name
    file_storage.save(path)
    mime_type = file_storage.mimetype or mimetypes.guess_type(safe_name)[0]
    stored = StoredFile(original, stored_name, path, path.stat().st_size, mime_type)
    logger.info("Stored upload %s (%s bytes) under %s", stored_name, stored.size_bytes, subdir)
    return stored


def resolve_upload(subdir: str, stored_name: str) -> Path:
    path = upload_root(subdir) / secure_filename(stored_name)
    if not path.is_file():
        raise NotFound("file")
    return path


def remove_upload(subdir: str, stored_name: str) -> None:
    path = upload_root(subdir) / secure_filename(stored_name)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.info("Upload %s already removed", stored_name)
