import base64
import binascii
import logging
import re
import time
from pathlib import Path

from app.core.config import settings

logger = logging.getLogger(__name__)

UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


class InvalidUpload(ValueError):
    pass


class UploadTooLarge(ValueError):
    pass


def safe_filename(filename: str) -> str:
    """Millisecond timestamp prefix plus the sanitized original name."""
    return f"{int(time.time() * 1000)}_{UNSAFE_CHARS.sub('_', filename)}"


def decode_payload(data: str) -> bytes:
    # strip a data:<mime>;base64, prefix if present
    if "," in data:
        data = data.split(",", 1)[1]
    try:
        content = base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise InvalidUpload("Invalid base64 data") from e
    if not content:
        raise InvalidUpload("Invalid base64 data")
    return content


def save_base64_upload(filename: str, data: str, uploads_dir: Path | None = None) -> tuple[str, int]:
    """Decode and store an upload. Returns (stored name, size in bytes)."""
    content = decode_payload(data)
    if len(content) > settings.max_upload_bytes:
        raise UploadTooLarge(f"Upload exceeds {settings.max_upload_bytes} bytes")

    destination_dir = uploads_dir or settings.uploads_path
    destination_dir.mkdir(parents=True, exist_ok=True)

    stored_name = safe_filename(filename)
    (destination_dir / stored_name).write_bytes(content)

    logger.info("File uploaded: %s (%.2f KB)", stored_name, len(content) / 1024)
    return stored_name, len(content)
