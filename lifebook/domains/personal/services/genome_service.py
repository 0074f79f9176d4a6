"""Genome file uploads. Files stay on disk; rows hold metadata only."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage

from lifebook.core import records, uploads
from lifebook.core.errors import StorageError

ENTITY = "genome_uploads"
LABEL = "genome_upload"
UPLOAD_SUBDIR = "genome"


def list_uploads(user_id: int) -> list[dict]:
    return records.list_owned(ENTITY, user_id)


def add_upload(user_id: int, file_storage: Optional[FileStorage]) -> dict:
    stored = uploads.save_upload(file_storage, UPLOAD_SUBDIR)
    try:
        return records.create_owned(ENTITY, user_id, stored.metadata())
    except StorageError:
        uploads.remove_upload(UPLOAD_SUBDIR, stored.stored_name)
        raise


def download_path(user_id: int, upload_id: int) -> tuple[Path, dict]:
    record = records.get_owned(ENTITY, user_id, upload_id, label=LABEL)
    return uploads.resolve_upload(UPLOAD_SUBDIR, record["stored_name"]), record


def delete_upload(user_id: int, upload_id: int) -> None:
    record = records.get_owned(ENTITY, user_id, upload_id, label=LABEL)
    records.delete_owned(ENTITY, user_id, upload_id, label=LABEL)
    uploads.remove_upload(UPLOAD_SUBDIR, record["stored_name"])
