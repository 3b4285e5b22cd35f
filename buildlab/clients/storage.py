"""Object storage adapter backed by S3."""

import asyncio
from typing import Any, Protocol

import boto3


class ObjectStore(Protocol):
    """Minimal write interface the preview publisher needs."""

    bucket: str
    region: str

    async def put_object(
        self, key: str, body: str, content_type: str, cache_control: str
    ) -> None: ...


class S3ObjectStore:
    """Uploads objects to an S3 bucket.

    boto3 is synchronous; calls run in a worker thread so uploads do not block
    the event loop serving other requests.
    """

    def __init__(self, bucket: str, region: str, client: Any = None):
        self.bucket = bucket
        self.region = region
        self._client = client or boto3.client("s3", region_name=region)

    async def put_object(self, key: str, body: str, content_type: str, cache_control: str) -> None:
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=body.encode("utf-8"),
            ContentType=content_type,
            CacheControl=cache_control,
        )
