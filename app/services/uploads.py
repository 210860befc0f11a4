"""Store uploaded profile assets on local disk and return their public URL."""

import uuid
from pathlib import Path

UPLOADS_URL_PREFIX = "/uploads"


class UploadError(Exception):
    """Raised when an upload is rejected (bad folder, empty or oversized file)."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _validate_folder(folder: str) -> str:
    name = (folder or "").strip()
    if not name:
        raise UploadError("Folder is required.")
    if "/" in name or "\\" in name or name in (".", "..") or ".." in name:
        raise UploadError("Folder must be a single directory name.")
    return name


def save_profile_asset(
    root: str | Path,
    folder: str,
    filename: str | None,
    content: bytes,
    max_bytes: int,
) -> str:
    """
    Write content to <root>/<folder>/<uuid4><ext> and return /uploads/<folder>/<name>.

    The original file name contributes only its extension.
    """
    folder_name = _validate_folder(folder)
    if not content:
        raise UploadError("File is required.")
    if len(content) > max_bytes:
        raise UploadError(
            f"File size must not exceed {max_bytes} bytes.", status_code=413
        )

    target_dir = Path(root) / folder_name
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4()}{Path(filename or '').suffix.lower()}"
    (target_dir / stored_name).write_bytes(content)
    return f"{UPLOADS_URL_PREFIX}/{folder_name}/{stored_name}"
