import logging
import re
import time
import uuid
from pathlib import Path
from typing import Callable, Protocol

import boto3
from fastapi import Request

logger = logging.getLogger(__name__)

_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,10}$")


class MediaStorage(Protocol):
    """Saves an uploaded blob and returns the URL it is served from."""

    def store(self, data: bytes, original_filename: str | None, content_type: str | None = None) -> str:
        ...


def build_object_name(original_filename: str | None) -> str:
    """Timestamped unique name that keeps the original extension."""
    extension = Path(original_filename or "").suffix.lower()
    if not _EXTENSION_PATTERN.match(extension):
        extension = ""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension}"


def _join_path(*segments: str) -> str:
    cleaned = [segment.strip("/") for segment in segments if segment and segment.strip("/")]
    return "/".join(cleaned)


class BucketMediaStorage:
    """Public-read objects in an S3-compatible bucket."""

    def __init__(
        self,
        bucket: str,
        public_base_url: str,
        base_path: str = "",
        client=None,
        region: str | None = None,
        endpoint: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ):
        if not bucket:
            raise ValueError("SPACES_NAME is required for bucket media storage")
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.base_path = base_path.strip("/")
        if client is None:
            session = boto3.session.Session()
            client = session.client(
                "s3",
                region_name=region,
                endpoint_url=endpoint,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        self.client = client

    def store(self, data: bytes, original_filename: str | None, content_type: str | None = None) -> str:
        key = _join_path(self.base_path, build_object_name(original_filename))
        extra_args = {"ACL": "public-read"}
        if content_type:
            extra_args["ContentType"] = content_type

        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            **extra_args
        )
        logger.debug("Stored %s bytes at s3://%s/%s", len(data), self.bucket, key)
        return f"{self.public_base_url}/{key}"


class LocalMediaStorage:
    """Files in a local directory served under a static URL prefix."""

    def __init__(self, root: str | Path, url_prefix: str = "/uploads"):
        self.root = Path(root).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _write(self, data: bytes, original_filename: str | None) -> str:
        name = build_object_name(original_filename)
        (self.root / name).write_bytes(data)
        return name

    def store(self, data: bytes, original_filename: str | None, content_type: str | None = None) -> str:
        name = self._write(data, original_filename)
        return f"{self.url_prefix}/{name}"


class GitMirrorMediaStorage(LocalMediaStorage):
    """Local files that are also queued for the media repository push."""

    def __init__(
        self,
        root: str | Path,
        sync_queue,
        url_prefix: str = "/uploads",
        on_enqueue: Callable[[], None] | None = None,
    ):
        super().__init__(root, url_prefix)
        self.sync_queue = sync_queue
        self.on_enqueue = on_enqueue

    def store(self, data: bytes, original_filename: str | None, content_type: str | None = None) -> str:
        name = self._write(data, original_filename)
        self.sync_queue.enqueue(name)
        if self.on_enqueue:
            self.on_enqueue()
        return f"{self.url_prefix}/{name}"


def bucket_public_base_url(settings) -> str:
    if settings.SPACES_CDN_URL:
        return settings.SPACES_CDN_URL.rstrip("/")
    if settings.SPACES_ENDPOINT:
        return f"{settings.SPACES_ENDPOINT.rstrip('/')}/{settings.SPACES_NAME}"
    if settings.SPACES_REGION:
        return f"https://{settings.SPACES_NAME}.s3.{settings.SPACES_REGION}.amazonaws.com"
    return f"https://{settings.SPACES_NAME}.s3.amazonaws.com"


def build_media_storage(settings, sync_queue=None, on_enqueue: Callable[[], None] | None = None) -> MediaStorage:
    """Select the media strategy named by MEDIA_BACKEND."""
    backend = settings.MEDIA_BACKEND
    if backend == "bucket":
        return BucketMediaStorage(
            bucket=settings.SPACES_NAME,
            public_base_url=bucket_public_base_url(settings),
            base_path=settings.SPACES_BASE_PATH,
            region=settings.SPACES_REGION,
            endpoint=settings.SPACES_ENDPOINT,
            access_key=settings.SPACES_KEY,
            secret_key=settings.SPACES_SECRET,
        )
    if backend == "local":
        return LocalMediaStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
    if backend == "git":
        if sync_queue is None:
            raise ValueError("git media storage needs a sync queue")
        return GitMirrorMediaStorage(
            settings.UPLOAD_DIR,
            sync_queue,
            url_prefix=settings.UPLOAD_URL_PREFIX,
            on_enqueue=on_enqueue,
        )
    raise ValueError(f"Unknown MEDIA_BACKEND: {backend!r}")


def get_media_storage(request: Request) -> MediaStorage:
    return request.app.state.media_storage
