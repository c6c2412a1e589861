"""
Bucket client for S3-compatible storage (AWS S3 and Google Cloud Storage).

Every operation maps to a single boto3 call (listing follows continuation
tokens until the last page). SDK errors are logged and propagate unchanged.

Example:
    client = BucketClient(
        "https://storage.googleapis.com", access_key, secret_key,
        use_gcs=True, default_bucket_name="px-tables",
    )
    client.upload_file("tables/a.px", stream)
    text = client.read_file("tables/a.px", lambda body: body.read().decode("utf-8"))
"""

from __future__ import annotations

import logging
from typing import IO, Any, Callable, Optional, TypeVar

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import ClientError

from .settings import BucketSettings, load_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build_s3_client(
    endpoint: str,
    access_key: str,
    secret_key: str,
    session_token: Optional[str],
    use_gcs: bool,
    region: Optional[str],
) -> BaseClient:
    """
    Create a boto3 S3 client with path-style addressing.

    GCS only accepts SigV4 on its S3-compatible endpoint, so ``use_gcs``
    pins the signature version to ``s3v4``.
    """
    config_kwargs: dict[str, Any] = {"s3": {"addressing_style": "path"}}
    if use_gcs:
        config_kwargs["signature_version"] = "s3v4"

    client_kwargs: dict[str, Any] = {
        "endpoint_url": endpoint,
        "aws_access_key_id": access_key,
        "aws_secret_access_key": secret_key,
        "config": Config(**config_kwargs),
    }
    if session_token is not None:
        client_kwargs["aws_session_token"] = session_token
    if region:
        client_kwargs["region_name"] = region

    return boto3.client("s3", **client_kwargs)


class BucketClient:
    """Thin facade over an S3 client with an optional default bucket."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None,
        use_gcs: bool = False,
        default_bucket_name: Optional[str] = None,
        s3_client: Optional[BaseClient] = None,
        region: Optional[str] = None,
    ):
        """
        Initialize the bucket client.

        Args:
            endpoint: Endpoint URL of the S3 service
                - AWS S3: 'https://s3.amazonaws.com'
                - GCS: 'https://storage.googleapis.com'
            access_key: Access key (HMAC key id for GCS)
            secret_key: Secret key
            session_token: Optional session token for temporary credentials
            use_gcs: Use Google Cloud Storage's signature version (SigV4)
            default_bucket_name: Bucket used when a call names none
            s3_client: Pre-built S3 client; skips client construction
            region: Optional region name passed to boto3
        """
        if s3_client is None:
            s3_client = _build_s3_client(
                endpoint, access_key, secret_key, session_token, use_gcs, region
            )
        self._client = s3_client
        self._default_bucket_name = default_bucket_name
        self.endpoint = endpoint

    @classmethod
    def from_settings(
        cls, settings: BucketSettings, s3_client: Optional[BaseClient] = None
    ) -> BucketClient:
        return cls(
            settings.endpoint_url,
            settings.access_key,
            settings.secret_key,
            session_token=settings.session_token,
            use_gcs=settings.use_gcs,
            default_bucket_name=settings.default_bucket_name,
            s3_client=s3_client,
            region=settings.region,
        )

    @classmethod
    def from_env(cls, s3_client: Optional[BaseClient] = None) -> BucketClient:
        """Create a client from BUCKET_* environment variables."""
        return cls.from_settings(load_settings(), s3_client=s3_client)

    @property
    def default_bucket_name(self) -> Optional[str]:
        return self._default_bucket_name

    def _resolve_bucket(self, bucket_name: Optional[str]) -> str:
        bucket = self._default_bucket_name if bucket_name is None else bucket_name
        if not bucket:
            raise ValueError("No bucket name given and no default bucket configured")
        return bucket

    def create_bucket(self, bucket_name: Optional[str] = None) -> None:
        """
        Create a new bucket.

        Args:
            bucket_name: Bucket to create (default bucket if omitted)
        """
        bucket = self._resolve_bucket(bucket_name)
        try:
            self._client.create_bucket(Bucket=bucket)
        except ClientError as exc:
            logger.error("Failed to create bucket %s: %s", bucket, exc)
            raise
        logger.debug("Created bucket %s", bucket)

    def list_files(self, bucket_name: Optional[str] = None) -> list[dict]:
        """
        List all objects in a bucket, following continuation tokens.

        Args:
            bucket_name: Bucket to list (default bucket if omitted)

        Returns:
            Object entries as returned by ListObjectsV2, in listing order
        """
        bucket = self._resolve_bucket(bucket_name)
        request: dict[str, Any] = {"Bucket": bucket}
        files: list[dict] = []
        pages = 0
        try:
            while True:
                response = self._client.list_objects_v2(**request)
                pages += 1
                files.extend(response.get("Contents", []))
                if not response.get("IsTruncated"):
                    break
                request["ContinuationToken"] = response["NextContinuationToken"]
        except ClientError as exc:
            logger.error("Failed to list bucket %s: %s", bucket, exc)
            raise
        logger.debug("Listed %d objects in %s (%d pages)", len(files), bucket, pages)
        return files

    def upload_file(
        self, key: str, file_stream: IO[bytes], bucket_name: Optional[str] = None
    ) -> None:
        """
        Upload a stream to a bucket, replacing any object at ``key``.

        Args:
            key: Object key (path)
            file_stream: Binary stream with the content to upload
            bucket_name: Target bucket (default bucket if omitted)
        """
        bucket = self._resolve_bucket(bucket_name)
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=file_stream)
        except ClientError as exc:
            logger.error("Failed to upload %s: %s", self.uri_for(key, bucket), exc)
            raise
        logger.debug("Uploaded object to %s", self.uri_for(key, bucket))

    def delete_file(self, key: str, bucket_name: Optional[str] = None) -> None:
        """Delete an object. Deleting a missing key is left to the backend."""
        bucket = self._resolve_bucket(bucket_name)
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            logger.error("Failed to delete %s: %s", self.uri_for(key, bucket), exc)
            raise
        logger.debug("Deleted object %s", self.uri_for(key, bucket))

    def delete_bucket(self, bucket_name: Optional[str] = None) -> None:
        """Delete a bucket. Most backends require it to be empty."""
        bucket = self._resolve_bucket(bucket_name)
        try:
            self._client.delete_bucket(Bucket=bucket)
        except ClientError as exc:
            logger.error("Failed to delete bucket %s: %s", bucket, exc)
            raise
        logger.debug("Deleted bucket %s", bucket)

    def read_file(
        self,
        key: str,
        process_stream: Callable[[IO[bytes]], T],
        bucket_name: Optional[str] = None,
    ) -> T:
        """
        Open an object and hand its content stream to ``process_stream``.

        The stream is closed once the handler returns or raises.

        Args:
            key: Object key (path)
            process_stream: Called with the object's body stream
            bucket_name: Source bucket (default bucket if omitted)

        Returns:
            Whatever ``process_stream`` returns
        """
        bucket = self._resolve_bucket(bucket_name)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            logger.error("Failed to read %s: %s", self.uri_for(key, bucket), exc)
            raise

        body = response["Body"]
        try:
            return process_stream(body)
        finally:
            body.close()
            logger.debug("Closed stream for %s", self.uri_for(key, bucket))

    def uri_for(self, key: str, bucket_name: Optional[str] = None) -> str:
        """
        Build the ``s3://bucket/key`` URI of an object.

        The scheme is s3:// for both AWS S3 and GCS; the endpoint is part of
        the client configuration, not the URI.
        """
        return f"s3://{self._resolve_bucket(bucket_name)}/{key}"
