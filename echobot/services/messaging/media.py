import mimetypes
import os
import re
from pathlib import Path
from typing import Union

from echobot.logging import setup_logger

logger = setup_logger(__name__)

DEFAULT_EXTENSION = ".bin"
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def extension_for_mime(mime_type: str) -> str:
    """
    Resolve a file extension for a MIME type.

    Parameters such as ``; codecs=opus`` are ignored. The canonical extension
    is preferred (``image/jpeg`` -> ``.jpg``), then the first known one.
    """
    base_type = (mime_type or "").split(";", 1)[0].strip().lower()
    if not base_type:
        return DEFAULT_EXTENSION

    extension = mimetypes.guess_extension(base_type)
    if extension:
        return extension

    extensions = sorted(mimetypes.guess_all_extensions(base_type))
    return extensions[0] if extensions else DEFAULT_EXTENSION


def _safe_part(value: str) -> str:
    return UNSAFE_CHARS.sub("_", value) or "_"


def media_filename(sender: str, message_id: str, mime_type: str) -> str:
    """Build the ``<sender>-<message_id><ext>`` name for a received file."""
    return f"{_safe_part(sender)}-{_safe_part(message_id)}{extension_for_mime(mime_type)}"


def save_media(
    folder: Union[str, Path],
    sender: str,
    message_id: str,
    content: bytes,
    mime_type: str,
) -> Path:
    """
    Write received media to ``folder``, creating it if needed.

    Raises:
        OSError: if the folder or the file cannot be written
    """
    folder = Path(folder)
    folder.mkdir(mode=0o755, parents=True, exist_ok=True)

    file_path = folder / media_filename(sender, message_id, mime_type)
    file_path.write_bytes(content)
    os.chmod(file_path, 0o600)

    logger.info(f"Saved media to {file_path}")
    return file_path


def read_media(file_path: Union[str, Path]) -> bytes:
    return Path(file_path).read_bytes()
