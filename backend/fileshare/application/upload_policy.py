"""
Upload Policy

Validation rules applied to an upload request and to the bytes it streams.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, FrozenSet

from fileshare.domain.errors import InvalidInputError

DEFAULT_MAX_UPLOAD_MB = 20

READ_CHUNK_SIZE = 64 * 1024

DEFAULT_ALLOWED_CONTENT_TYPES = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "text/csv",
    "application/vnd.ms-excel",
    "application/zip",
    "application/x-zip-compressed",
})


@dataclass(frozen=True)
class UploadPolicy:
    """
    Size and content-type limits for uploads.

    An empty ``allowed_content_types`` set accepts any content type.
    """
    max_size_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
    allowed_content_types: FrozenSet[str] = field(default=DEFAULT_ALLOWED_CONTENT_TYPES)

    @classmethod
    def permissive(cls, max_size_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024) -> "UploadPolicy":
        return cls(max_size_bytes=max_size_bytes, allowed_content_types=frozenset())

    def validate(self, name: str, content_type: str, size: int) -> None:
        """
        Check an upload request.

        Raises:
            InvalidInputError: If any rule is violated
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("File name is required")

        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise InvalidInputError(f"Invalid file size: {size!r}")

        if size > self.max_size_bytes:
            raise InvalidInputError(
                f"File exceeds maximum upload size of {self.max_size_bytes} bytes"
            )

        if not self.allowed_content_types:
            return
        normalized = content_type.strip().lower() if isinstance(content_type, str) else ""
        if normalized not in self.allowed_content_types:
            raise InvalidInputError(f"File type not allowed: {content_type}")

    def limit_stream(self, stream: BinaryIO) -> "CountingReader":
        """Wrap an upload stream so the size limit applies to the bytes actually read."""
        return CountingReader(stream, self.max_size_bytes)


class CountingReader:
    """
    Read-only stream wrapper that counts bytes and enforces a size limit.

    Raises InvalidInputError from ``read`` as soon as more than ``limit``
    bytes have come through, so a blob store never writes past the limit.
    """

    def __init__(self, stream: BinaryIO, limit: int):
        self._stream = stream
        self._limit = limit
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            chunks = []
            while True:
                chunk = self.read(READ_CHUNK_SIZE)
                if not chunk:
                    return b"".join(chunks)
                chunks.append(chunk)

        data = self._stream.read(size)
        self.bytes_read += len(data)
        if self.bytes_read > self._limit:
            raise InvalidInputError(
                f"File exceeds maximum upload size of {self._limit} bytes"
            )
        return data

    def readable(self) -> bool:
        return True

    def tell(self) -> int:
        return self.bytes_read
