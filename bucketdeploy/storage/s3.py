from __future__ import annotations

from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from bucketdeploy.exceptions import S3Error, UploadError


class S3Storage:
    def __init__(
        self,
        region: Optional[str] = None,
        key: str = "",
        secret: str = "",
        endpoint_url: Optional[str] = None,
    ) -> None:
        session_kwargs = {}
        if region:
            session_kwargs["region_name"] = region
        # Empty credentials fall through to boto3's default provider chain
        if key and secret:
            session_kwargs["aws_access_key_id"] = key
            session_kwargs["aws_secret_access_key"] = secret
        try:
            session = boto3.session.Session(**session_kwargs)
            self.client = session.client("s3", endpoint_url=endpoint_url)
        except (BotoCoreError, ValueError) as exc:
            raise S3Error("Unable to create S3 client", {"reason": str(exc)}) from exc

    def bucket_exists(self, bucket: str) -> bool:
        try:
            result = self.client.list_buckets()
        except (BotoCoreError, ClientError) as exc:
            raise S3Error("Unable to list buckets", {"reason": str(exc)}) from exc
        return any(entry.get("Name") == bucket for entry in result.get("Buckets", []))

    def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        content_type: Optional[str] = None,
    ) -> str:
        params = {"Bucket": bucket, "Key": key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(f"Failed to upload {key}", {"key": key, "reason": str(exc)}) from exc
        return f"s3://{bucket}/{key}"


__all__ = ["S3Storage"]
