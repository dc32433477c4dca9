"""
Directory deployment to object storage.

Uploads every file beneath a source directory to a bucket under a
timestamp prefix (``YYYY-MM-DDTHH:MM:SS``), preserving the relative
path structure. Files are uploaded one at a time in
lexical order, directory by directory; a file that cannot be opened or
uploaded, or a directory that cannot be listed, is reported and skipped.
"""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, NamedTuple

from loguru import logger

from bucketdeploy.exceptions import (
    BucketNotFoundError,
    ConfigurationError,
    SourceNotFoundError,
    UploadError,
)
from bucketdeploy.settings import DeploySettings
from bucketdeploy.storage import ObjectStorage

DEFAULT_CONTENT_TYPE = "application/octet-stream"

Echo = Callable[[str], None]


class UploadTask(NamedTuple):
    path: Path
    key: str


@dataclass
class DeployResult:
    """Outcome of a deploy run."""

    prefix: str
    bucket: str
    uploaded: list[str] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def dir_exists(path: Path) -> bool:
    """Return whether ``path`` exists.

    Only a missing path counts as "does not exist"; permission and other
    I/O errors raised by ``os.stat`` propagate to the caller.
    """
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def check_source(source: Path) -> None:
    try:
        exists = dir_exists(source)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to access source directory: {exc.strerror or exc}",
            {"source": str(source)},
        ) from exc
    if not exists:
        raise SourceNotFoundError("Source directory does not exist", {"source": str(source)})
    if not source.is_dir():
        raise SourceNotFoundError("Source path is not a directory", {"source": str(source)})


def check_bucket(storage: ObjectStorage, bucket: str) -> None:
    if not storage.bucket_exists(bucket):
        raise BucketNotFoundError("Destination bucket does not exist", {"bucket": bucket})


def build_prefix(now: datetime | None = None) -> str:
    """Deployment prefix from local wall-clock time, truncated to the second."""
    t = now or datetime.now()
    return "%d-%02d-%02dT%02d:%02d:%02d" % (t.year, t.month, t.day, t.hour, t.minute, t.second)


def object_key(prefix: str, source: Path, path: Path) -> str:
    rel_path = os.path.relpath(path, source).replace(os.sep, "/")
    return f"{prefix}/{rel_path}"


def _log_walk_error(exc: OSError) -> None:
    logger.error("Unable to read directory {path}: {reason}", path=exc.filename, reason=exc.strerror or exc)


def iter_upload_tasks(
    source: Path,
    prefix: str,
    onerror: Callable[[OSError], None] = _log_walk_error,
) -> Iterator[UploadTask]:
    """Yield one task per file under ``source``; directories yield nothing.

    Entries are visited in lexical order within each directory. A directory
    that cannot be listed is handed to ``onerror`` and its contents skipped.
    """
    for root, dirs, files in os.walk(source, onerror=onerror):
        dirs.sort()
        for filename in sorted(files):
            path = Path(root) / filename
            yield UploadTask(path, object_key(prefix, source, path))


def guess_content_type(path: Path) -> str:
    return mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE


def upload_tree(
    storage: ObjectStorage,
    bucket: str,
    source: Path,
    prefix: str,
    echo: Echo = print,
) -> DeployResult:
    result = DeployResult(prefix=prefix, bucket=bucket)

    def skip_directory(exc: OSError) -> None:
        _log_walk_error(exc)
        directory = Path(exc.filename) if exc.filename else source
        echo(f"Unable to read directory {directory}")
        result.failed.append(directory)

    for task in iter_upload_tasks(source, prefix, onerror=skip_directory):
        try:
            fp = task.path.open("rb")
        except OSError as exc:
            logger.error("Unable to open {path}: {reason}", path=task.path, reason=exc.strerror or exc)
            echo(f"Unable to open {task.path}")
            result.failed.append(task.path)
            continue

        with fp:
            try:
                storage.put_object(bucket, task.key, fp, guess_content_type(task.path))
            except (UploadError, OSError) as exc:
                reason = exc.details.get("reason", exc.message) if isinstance(exc, UploadError) else exc
                logger.error(
                    "Failed to upload {path} to {key}: {reason}",
                    path=task.path,
                    key=task.key,
                    reason=reason,
                )
                echo(f"Failed to upload {task.path}")
                result.failed.append(task.path)
                continue

        logger.debug("Put {key}", key=task.key)
        echo(f"Uploaded {task.path}")
        result.uploaded.append(task.key)

    return result


def build_storage(settings: DeploySettings) -> ObjectStorage:
    if settings.local_root is not None:
        from bucketdeploy.storage.local import LocalStorage

        return LocalStorage(settings.local_root)

    from bucketdeploy.storage.s3 import S3Storage

    return S3Storage(
        region=settings.region,
        key=settings.key,
        secret=settings.secret,
        endpoint_url=settings.endpoint_url,
    )


def deploy(
    settings: DeploySettings,
    storage: ObjectStorage | None = None,
    echo: Echo = print,
) -> DeployResult:
    """Upload ``settings.source`` to ``settings.bucket`` under a fresh prefix.

    Args:
        settings: Validated run parameters.
        storage: Storage backend. Built from ``settings`` when omitted.
        echo: Sink for the per-file and summary lines.

    Returns:
        DeployResult with the prefix, uploaded keys and failed paths.

    Raises:
        ConfigurationError: If the source directory or bucket is missing.
        StorageError: If the bucket check cannot reach the store.
    """
    check_source(settings.source)

    if storage is None:
        storage = build_storage(settings)
    check_bucket(storage, settings.bucket)

    prefix = build_prefix()
    logger.info(
        "Deploying {source} to bucket {bucket} with prefix {prefix}",
        source=settings.source,
        bucket=settings.bucket,
        prefix=prefix,
    )

    result = upload_tree(storage, settings.bucket, settings.source, prefix, echo=echo)
    echo(f"Uploaded site with prefix: {prefix}")

    if result.failed:
        logger.warning(
            "{count} file(s) failed to upload: {paths}",
            count=len(result.failed),
            paths=", ".join(str(path) for path in result.failed),
        )
    return result


__all__ = [
    "DeployResult",
    "UploadTask",
    "build_prefix",
    "build_storage",
    "check_bucket",
    "check_source",
    "deploy",
    "dir_exists",
    "iter_upload_tasks",
    "object_key",
    "upload_tree",
]
