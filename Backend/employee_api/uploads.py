# uploads.py
import logging
import os
import random
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import UploadFile

from employee_api.errors import InvalidUploadTypeError, TooManyFilesError, UploadTooLargeError

logger = logging.getLogger(__name__)

PROFILE_IMAGE_FIELD = "profileImage"
ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png"})
MAX_UPLOAD_SIZE = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024
PUBLIC_PREFIX = "uploads"
# keeps "<millis>-<random>-<name>.part" under NAME_MAX and the public path
# inside the VARCHAR(255) profile_image column
MAX_ORIGINAL_NAME_BYTES = 100
MAX_EXTENSION_BYTES = 16


def has_file(upload: Optional[UploadFile]) -> bool:
    # browsers send an empty part with filename="" when no file was picked
    return upload is not None and not isinstance(upload, str) and bool(upload.filename)


def check_content_type(upload: UploadFile) -> None:
    content_type = (upload.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadTypeError()


def single_upload(uploads: Optional[List[UploadFile]]) -> Optional[UploadFile]:
    """Return the one attached file, or None; more than one is a policy error."""
    files = [u for u in uploads or [] if has_file(u)]
    if len(files) > 1:
        raise TooManyFilesError()
    return files[0] if files else None


def _safe_original_name(filename: str) -> str:
    name = os.path.basename(filename.replace("\\", "/")).strip() or "image"
    stem, ext = os.path.splitext(name)
    if len(ext.encode("utf-8")) > MAX_EXTENSION_BYTES:
        stem, ext = name, ""
    budget = MAX_ORIGINAL_NAME_BYTES - len(ext.encode("utf-8"))
    # cut on a byte boundary, dropping any split multi-byte character
    stem = stem.encode("utf-8")[:budget].decode("utf-8", "ignore")
    return (stem or "image") + ext


def generate_filename(original: str) -> str:
    """<epoch-millis>-<random>-<original name>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{unique_suffix}-{_safe_original_name(original)}"


def save_profile_image(upload: UploadFile, directory: str, max_size: int = MAX_UPLOAD_SIZE) -> str:
    """
    Store an uploaded profile image and return its public relative path.

    The declared content type is checked before anything is written. Bytes
    are streamed to a ``.part`` file which is renamed only once the whole
    payload fit under ``max_size``.
    """
    check_content_type(upload)
    os.makedirs(directory, exist_ok=True)

    filename = generate_filename(upload.filename)
    final_path = os.path.join(directory, filename)
    temp_path = final_path + ".part"

    total = 0
    try:
        with open(temp_path, "wb") as buffer:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > max_size:
                    raise UploadTooLargeError(f"File too large. Limit is {max_size} bytes")
                buffer.write(chunk)
        os.replace(temp_path, final_path)
    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise

    logger.info("Saved profile image %s (%d bytes)", final_path, total)
    return f"{PUBLIC_PREFIX}/{filename}"


def discard_profile_image(relative_path: str, directory: str) -> None:
    full_path = os.path.join(directory, os.path.basename(relative_path))
    try:
        if os.path.exists(full_path):
            os.remove(full_path)
            logger.info("Removed unused upload %s", full_path)
    except OSError as e:
        logger.warning("Could not remove upload %s: %s", full_path, e)


@contextmanager
def staged_upload(
    upload: Optional[UploadFile],
    directory: str,
    max_size: int = MAX_UPLOAD_SIZE,
) -> Iterator[Optional[str]]:
    """
    Yield the stored path of ``upload`` (None when no file was sent).

    If the block raises, the stored file is deleted so a failed request
    leaves nothing behind.
    """
    if not has_file(upload):
        yield None
        return

    path = save_profile_image(upload, directory, max_size)
    try:
        yield path
    except Exception:
        discard_profile_image(path, directory)
        raise
