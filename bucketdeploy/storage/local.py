from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from bucketdeploy.exceptions import StorageError, UploadError


class LocalStorage:
    """Directory-backed store: every subdirectory of ``root`` is a bucket."""

    def __init__(self, root: Path) -> None:
        self.root = root
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                "Unable to use local storage root",
                {"root": str(root), "reason": exc.strerror or str(exc)},
            ) from exc

    def bucket_exists(self, bucket: str) -> bool:
        return (self.root / bucket).is_dir()

    def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        content_type: Optional[str] = None,
    ) -> str:
        target = self.root / bucket / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as fp:
                shutil.copyfileobj(body, fp)
        except OSError as exc:
            raise UploadError(f"Failed to upload {key}", {"key": key, "reason": str(exc)}) from exc
        return str(target)


__all__ = ["LocalStorage"]
