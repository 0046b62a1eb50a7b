import contextlib
import logging
import os
import re
import time
from typing import Optional

from fastapi import UploadFile

from copisteria import config
from copisteria.models.order import StoredFile

logger = logging.getLogger(__name__)

ALLOWED_MIMETYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

CHUNK_SIZE = 1024 * 1024
UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9_.-]")


class UploadRejected(ValueError):
    """The uploaded document cannot be accepted with the order."""


def safe_filename(original: str) -> str:
    return UNSAFE_CHARS_RE.sub("_", original)


def discard_upload(filename: str, upload_dir: Optional[str] = None) -> None:
    """Remove a stored upload; missing files are ignored."""
    with contextlib.suppress(FileNotFoundError):
        os.remove(os.path.join(upload_dir or config.UPLOAD_DIR, filename))


async def save_upload(
    file: UploadFile,
    upload_dir: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> StoredFile:
    """Stream ``file`` to disk as ``<millis>-<safe name>`` and describe it."""
    upload_dir = upload_dir or config.UPLOAD_DIR
    max_bytes = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes

    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_MIMETYPES:
        logger.warning("Rejected upload %s with content type %s", file.filename, content_type)
        raise UploadRejected("Formato file non supportato. Usa PDF o DOC/DOCX.")

    original = file.filename or "documento"
    stored_name = f"{int(time.time() * 1000)}-{safe_filename(original)}"
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, stored_name)

    size = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadRejected("File troppo grande.")
                out.write(chunk)
    except UploadRejected:
        logger.warning("Rejected upload %s: larger than %s bytes", original, max_bytes)
        discard_upload(stored_name, upload_dir)
        raise
    except BaseException:
        # write error or client gone mid-upload: no truncated documents left behind
        logger.warning("Upload %s interrupted, removing partial file %s", original, stored_name)
        discard_upload(stored_name, upload_dir)
        raise

    logger.info("Saved upload %s as %s (%s bytes)", original, stored_name, size)
    return StoredFile(filename=stored_name, originalname=original, size=size, mimetype=content_type)
