"""On-disk storage for uploaded file content.

Content is written under the upload directory with a random name
(``<32 hex chars><ext>``); the uploaded name only lives in the database.
"""

import logging
import secrets
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import BinaryIO, Iterable, Optional

from ..core.config import settings
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredContent:
    filename: str
    file_path: str  # POSIX form, as recorded in the database
    size: int


class FileStorage:
    """Writes, locates and removes uploaded content."""

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_bytes = max_bytes or settings.max_upload_bytes
        self.allowed_extensions = frozenset(
            allowed_extensions if allowed_extensions is not None
            else settings.get_upload_extensions()
        )

    def check_extension(self, original_name: str) -> str:
        """Return the lower-cased extension (with dot) or raise ValidationError."""
        suffix = PurePath(original_name or "").suffix.lower()
        if not suffix or suffix[1:] not in self.allowed_extensions:
            raise ValidationError(
                f"Unsupported file type: {suffix or original_name!r}. "
                f"Allowed: {', '.join(sorted(self.allowed_extensions))}",
                field="file",
            )
        return suffix

    def save(self, stream: BinaryIO, original_name: str) -> StoredContent:
        """Copy *stream* to a new file in the upload directory.

        Raises:
            ValidationError: If the extension is not allowed or the content
                exceeds ``max_bytes``. Nothing is left on disk in that case.
        """
        suffix = self.check_extension(original_name)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        filename = f"{secrets.token_hex(16)}{suffix}"
        target = self.upload_dir / filename

        size = 0
        with open(target, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    out.close()
                    target.unlink(missing_ok=True)
                    raise ValidationError(
                        f"File exceeds maximum size of {self.max_bytes} bytes",
                        field="file",
                    )
                out.write(chunk)

        logger.debug("Stored upload %s (%d bytes)", filename, size)
        return StoredContent(filename=filename, file_path=target.as_posix(), size=size)

    def resolve(self, file_path: str) -> Optional[Path]:
        """Path of stored content, or None when it is missing on disk."""
        path = Path(file_path)
        return path if path.is_file() else None

    def remove(self, file_path: str) -> bool:
        """Best-effort removal. Failures are logged, never raised."""
        try:
            Path(file_path).unlink()
            return True
        except FileNotFoundError:
            logger.warning("Stored content already missing: %s", file_path)
        except OSError as e:
            logger.error("Failed to remove stored content %s: %s", file_path, e)
        return False
