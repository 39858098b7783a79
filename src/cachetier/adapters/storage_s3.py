"""S3 storage adapter."""

import io
import tempfile
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import ClientError

from ..core.errors import UnsupportedOperationError

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_CODES


class _S3Writer(io.RawIOBase):
    """Buffers written bytes and uploads them as one object on close.

    Leaving a ``with`` block on an exception drops the buffer without
    uploading.
    """

    def __init__(self, client: Any, bucket: str, key: str, max_memory: int):
        super().__init__()
        self._client = client
        self._bucket = bucket
        self._key = key
        self._buffer = tempfile.SpooledTemporaryFile(max_size=max_memory)

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:  # type: ignore[no-untyped-def, override]
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._buffer.write(b)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._buffer.seek(0)
            self._client.upload_fileobj(self._buffer, self._bucket, self._key)
        except ClientError as e:
            raise OSError(f"Failed to upload s3://{self._bucket}/{self._key}: {e}") from e
        finally:
            self._buffer.close()
            super().close()

    def abort(self) -> None:
        """Close without uploading."""
        if self.closed:
            return
        self._buffer.close()
        super().close()

    def __exit__(self, exc_type, exc, tb):  # type: ignore[no-untyped-def]
        if exc_type is not None:
            self.abort()
        else:
            self.close()


class S3StorageAdapter:
    """Storage backed by objects under a prefix of an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any | None = None,
        endpoint_url: str | None = None,
        region: str | None = None,
        profile: str | None = None,
        allow_delete_all: bool = True,
        max_memory: int = 8 * 1024 * 1024,
    ):
        """Initialize the adapter.

        Args:
            client: Pre-built boto3 S3 client. Built from the session options
                when omitted.
            allow_delete_all: If False, :meth:`delete_all` raises
                UnsupportedOperationError instead of emptying the prefix.
            max_memory: Bytes buffered in memory per writer before spilling
                to a temporary file.
        """
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.allow_delete_all = allow_delete_all
        self.max_memory = max_memory
        if client is None:
            session = boto3.Session(profile_name=profile)
            client = session.client("s3", endpoint_url=endpoint_url, region_name=region)
        self.client = client

    @property
    def label(self) -> str:
        return f"s3://{self.bucket}/{self.prefix}"

    def _key(self, id: str) -> str:
        return f"{self.prefix}/{id}" if self.prefix else id

    def contains(self, id: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(id))
        except ClientError as e:
            if _is_missing(e):
                return False
            raise OSError(f"Failed to check s3://{self.bucket}/{self._key(id)}: {e}") from e
        return True

    def open_output_stream(self, id: str) -> BinaryIO:
        return _S3Writer(self.client, self.bucket, self._key(id), self.max_memory)  # type: ignore[return-value]

    def open_input_stream(self, id: str) -> BinaryIO | None:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._key(id))
        except ClientError as e:
            if _is_missing(e):
                return None
            raise OSError(f"Failed to read s3://{self.bucket}/{self._key(id)}: {e}") from e
        return response["Body"]

    def delete(self, id: str) -> bool:
        # DeleteObject succeeds for missing keys, so check first
        if not self.contains(id):
            return False
        try:
            self.client.delete_object(Bucket=self.bucket, Key=self._key(id))
        except ClientError as e:
            raise OSError(f"Failed to delete s3://{self.bucket}/{self._key(id)}: {e}") from e
        return True

    def delete_all(self) -> None:
        if not self.allow_delete_all:
            raise UnsupportedOperationError(f"delete_all is disabled for {self.label}")
        list_prefix = f"{self.prefix}/" if self.prefix else ""
        paginator = self.client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix):
                objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
                if objects:
                    self.client.delete_objects(
                        Bucket=self.bucket,
                        Delete={"Objects": objects, "Quiet": True},
                    )
        except ClientError as e:
            raise OSError(f"Failed to delete objects under {self.label}: {e}") from e
