"""
Document attachment uploads.

One file per request (form field ``arquivo``). Files are validated before
anything is persisted and stored as ``<epoch-millis>-<random>-<original name>``.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from pathlib import PurePosixPath

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from app.gestao.errors import FILE_TOO_LARGE_MESSAGE, UploadError
from app.gestao.storage import LocalStorage

logger = logging.getLogger(__name__)

FIELD_NAME = "arquivo"
MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_CONTENT_TYPES = frozenset({"application/pdf", "image/jpeg", "image/jpg", "image/png"})


@dataclass(frozen=True)
class PendingUpload:
    original_filename: str
    content_type: str
    data: bytes
    stored_name: str


def build_stored_name(original_filename: str, *, now_ms: int | None = None, suffix: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = random.randint(0, 10**9)
    safe = secure_filename(original_filename or "") or "documento.bin"
    return f"{now_ms}-{suffix}-{safe}"


def original_name_from_stored(stored_name: str) -> str:
    """Inverse of build_stored_name: drop the ``<timestamp>-<random>-`` prefix."""
    parts = (stored_name or "").split("-")
    return "-".join(parts[2:])


def download_name(stored_name: str, documento_nome: str) -> str:
    name = original_name_from_stored(stored_name)
    if name:
        return name
    return f"{documento_nome}{PurePosixPath(stored_name).suffix}"


def read_upload(f: FileStorage | None) -> PendingUpload | None:
    """
    Validate the uploaded file and load it in memory.

    Returns None when no file was sent. Raises UploadError for a disallowed
    content type or a file above MAX_FILE_SIZE.
    """
    if f is None or not f.filename:
        return None
    content_type = (f.mimetype or "").strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadError("Tipo de arquivo não permitido", extra={"content_type": content_type or None})
    data = f.read(MAX_FILE_SIZE + 1)
    if len(data) > MAX_FILE_SIZE:
        raise UploadError(FILE_TOO_LARGE_MESSAGE)
    return PendingUpload(
        original_filename=f.filename,
        content_type=content_type,
        data=data,
        stored_name=build_stored_name(f.filename),
    )


def store(storage: LocalStorage, upload: PendingUpload) -> str:
    storage.put_bytes(upload.stored_name, upload.data)
    logger.info("Stored upload %s (%s bytes, %s)", upload.stored_name, len(upload.data), upload.content_type)
    return upload.stored_name


def discard(storage: LocalStorage, stored_name: str | None) -> None:
    if stored_name and storage.delete(stored_name):
        logger.info("Removed stored file %s", stored_name)
