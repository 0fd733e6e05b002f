"""Credential document files on disk."""
import logging
import os
import secrets
import time
from pathlib import Path
from typing import BinaryIO, Optional

from nightguard import config
from nightguard.services.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Saves uploads under a server-controlled directory with generated names.

    Invariants:
    - Only .jpg, .jpeg, .png and .pdf files up to the size limit are accepted
    - Client filenames never reach the filesystem, only their extension does
    - Reads resolve strictly inside the upload directory
    """

    def __init__(self, root: Optional[str] = None, max_bytes: int = config.MAX_UPLOAD_BYTES):
        self.root = Path(root or config.UPLOAD_DIR).resolve()
        self.max_bytes = max_bytes

    def check_upload(self, original_name: Optional[str], size: int) -> str:
        """Validate name and size; return the lower-cased extension."""
        if not original_name:
            raise ValidationError("No file uploaded")
        extension = os.path.splitext(original_name)[1].lower()
        if extension not in config.ALLOWED_DOCUMENT_EXTENSIONS:
            raise ValidationError(
                "Invalid file type. Only JPG, PNG or PDF files are allowed.",
                errors=[{"field": "document", "message": f"Extension {extension or '(none)'} not allowed"}]
            )
        if size > self.max_bytes:
            raise ValidationError(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB.",
                errors=[{"field": "document", "message": f"{size} bytes exceeds {self.max_bytes}"}]
            )
        return extension

    def read_upload(self, stream: BinaryIO) -> bytes:
        """Read at most one byte past the limit, enough for check_upload to refuse oversize files."""
        return stream.read(self.max_bytes + 1)

    def save(self, original_name: Optional[str], content: bytes) -> str:
        """Write an upload and return its generated filename."""
        extension = self.check_upload(original_name, len(content))
        filename = f"document-{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}{extension}"

        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / filename).write_bytes(content)
        logger.info("Stored document %s (%d bytes)", filename, len(content))
        return filename

    def discard(self, filename: str) -> None:
        """Remove a saved upload that was never attached to a user."""
        (self.root / filename).unlink(missing_ok=True)
        logger.info("Discarded document %s", filename)

    def path_for(self, filename: str) -> Path:
        """Absolute path of a stored document, by exact filename."""
        if not filename or filename != os.path.basename(filename) or filename.startswith("."):
            raise NotFound("Document not found")
        path = self.root / filename
        if not path.is_file():
            raise NotFound("Document not found")
        return path

    @staticmethod
    def public_path(filename: str) -> str:
        """Value recorded on the user as document_path."""
        return f"/uploads/{filename}"
