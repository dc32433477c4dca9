"""Storage abstraction (S3/MinIO or a local directory store)."""

from __future__ import annotations

from typing import BinaryIO, Protocol


class ObjectStorage(Protocol):
    def bucket_exists(self, bucket: str) -> bool:
        ...

    def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        content_type: str | None = None,
    ) -> str:  # returns uri
        ...


__all__ = ["ObjectStorage"]
