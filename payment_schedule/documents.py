"""Invoice upload handling.

Uploads are validated by type and size only; contents are never inspected.
There is no real storage behind :class:`DocumentStore`: a successful upload
just synthesizes a path under ``upload_root``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .errors import DocumentError, FileTooLargeError, UnsupportedFormatError
from .i18n import DEFAULT_LANGUAGE, Language, get_language, text
from .models import DocumentRef

logger = logging.getLogger("payment_schedule.documents")

UPLOAD_ROOT = "/uploads"
MAX_UPLOAD_SIZE = 5 * 1024 * 1024

ALLOWED_CONTENT_TYPES = {
    "application/pdf": "PDF",
    "image/jpeg": "JPG",
    "image/png": "PNG",
    "application/msword": "DOC",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "DOCX",
}

EXTENSION_CONTENT_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    def resolved_content_type(self) -> Optional[str]:
        if self.content_type:
            return self.content_type.split(";")[0].strip().lower()
        extension = self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""
        return EXTENSION_CONTENT_TYPES.get(extension)


@dataclass(frozen=True)
class UploadResult:
    document: Optional[DocumentRef] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.document is not None

    @classmethod
    def success(cls, document: DocumentRef) -> "UploadResult":
        return cls(document=document)

    @classmethod
    def failure(cls, reason: str) -> "UploadResult":
        return cls(reason=reason)


class DocumentStore:
    def __init__(
        self,
        upload_root: str = UPLOAD_ROOT,
        max_size: int = MAX_UPLOAD_SIZE,
        clock: Callable[[], datetime] | None = None,
        delay: float = 0.0,
        language: Language | str = DEFAULT_LANGUAGE,
    ) -> None:
        self.upload_root = upload_root.rstrip("/")
        self.max_size = max_size
        self.delay = delay
        self._clock = clock or datetime.now
        self.language = get_language(language)

    def validate(self, upload: UploadedFile) -> None:
        """Raise when ``upload`` is of an unsupported type or too large."""

        content_type = upload.resolved_content_type()
        if content_type not in ALLOWED_CONTENT_TYPES:
            supported = ", ".join(ALLOWED_CONTENT_TYPES.values())
            raise UnsupportedFormatError(
                f"Unsupported file format for {upload.filename!r} "
                f"({content_type or 'unknown'}); supported formats: {supported}"
            )
        if upload.size > self.max_size:
            raise FileTooLargeError(
                f"{upload.filename!r} is {upload.size} bytes; "
                f"the limit is {self.max_size} bytes"
            )

    def document_path(self, filename: str) -> str:
        stamp = int(self._clock().timestamp() * 1000)
        return f"{self.upload_root}/{stamp}-{Path(filename).name}"

    async def upload(self, upload: UploadedFile) -> UploadResult:
        """Validate and "store" ``upload``.

        Rejections come back as a failed :class:`UploadResult`. Cancelling the
        awaiting task abandons the upload without producing a document.
        """

        try:
            self.validate(upload)
        except DocumentError as exc:
            logger.warning("Rejected upload %s: %s", upload.filename, exc)
            reason = text(self.language, exc.message_key) if exc.message_key else str(exc)
            return UploadResult.failure(reason)

        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            logger.info("Upload of %s cancelled", upload.filename)
            raise

        name = Path(upload.filename).name
        document = DocumentRef(path=self.document_path(name), name=name)
        logger.info("Uploaded %s to %s", upload.filename, document.path)
        return UploadResult.success(document)
