"""Local file storage for uploaded resumes."""

import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.exceptions import PayloadTooLarge, UnsupportedMedia

logger = logging.getLogger(__name__)

RESUME_EXTENSIONS = (".pdf", ".doc", ".docx")
RESUME_SUBFOLDER = "resumes"
CHUNK_SIZE = 64 * 1024


class ResumeStorage:
    """
    Resume blob store with an extension allow-list and a size ceiling.

    Files are written under <base_path>/resumes with a randomized name
    derived from the upload time, keeping the original extension.
    """

    def __init__(
        self,
        base_path: str = "./uploads",
        max_size: int = 5 * 1024 * 1024,
        allowed_extensions: Iterable[str] = RESUME_EXTENSIONS,
    ):
        """
        Args:
            base_path: Directory served under the /uploads URL prefix
            max_size: Largest accepted file in bytes
            allowed_extensions: Lowercase extensions including the dot
        """
        self.base_path = Path(base_path)
        self.directory = self.base_path / RESUME_SUBFOLDER
        self.directory.mkdir(parents=True, exist_ok=True)
        self.max_size = max_size
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)

    def extension_of(self, filename: Optional[str]) -> str:
        return Path(filename or "").suffix.lower()

    def validate(self, filename: Optional[str], size: int) -> None:
        """
        Raises:
            UnsupportedMedia: Extension outside the allow-list
            PayloadTooLarge: File larger than max_size
        """
        if self.extension_of(filename) not in self.allowed_extensions:
            raise UnsupportedMedia(allowed=list(self.allowed_extensions))
        if size > self.max_size:
            raise PayloadTooLarge(
                f"Resume exceeds the {self.max_size // (1024 * 1024)}MB limit",
                maxSize=self.max_size,
            )

    async def read_upload(self, upload: UploadFile) -> bytes:
        """
        Read and validate an uploaded resume.

        Reads at most max_size + 1 bytes, so oversized files are rejected
        without buffering them completely.
        """
        if self.extension_of(upload.filename) not in self.allowed_extensions:
            raise UnsupportedMedia(allowed=list(self.allowed_extensions))

        data = bytearray()
        while len(data) <= self.max_size:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            data.extend(chunk)

        self.validate(upload.filename, len(data))
        return bytes(data)

    def generate_filename(self, original_filename: str) -> str:
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"resume-{unique_suffix}{self.extension_of(original_filename)}"

    def _write(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    async def save(self, data: bytes, original_filename: str) -> str:
        """
        Save a validated resume.

        Returns:
            Stored filename (relative to the resumes folder)
        """
        filename = self.generate_filename(original_filename)
        path = self.directory / filename
        await run_in_threadpool(self._write, path, data)
        logger.info(f"Saved resume {filename} ({len(data)} bytes)")
        return filename

    def path_for(self, filename: str) -> Optional[Path]:
        """Absolute path of a stored resume, or None if it is missing."""
        # Stored names never contain separators; refuse anything that does
        if Path(filename).name != filename:
            return None
        path = self.directory / filename
        return path if path.is_file() else None

    def delete(self, filename: str) -> bool:
        path = self.path_for(filename)
        if path is None:
            return False
        path.unlink()
        logger.info(f"Deleted resume {filename}")
        return True

    def url_for(self, filename: str) -> str:
        return f"/uploads/{RESUME_SUBFOLDER}/{filename}"
