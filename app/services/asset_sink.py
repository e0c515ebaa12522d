import logging
import mimetypes
import os
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Lock

import urllib3
from flask import current_app
from minio import Minio
from werkzeug.utils import secure_filename


logger = logging.getLogger(__name__)

MINIO_PART_SIZE = 10 * 1024 * 1024


class AssetStorageError(Exception):
    pass


@dataclass(frozen=True)
class StoredAsset:
    url: str
    object_name: str


def _extension_for(file_storage) -> str:
    filename = secure_filename(getattr(file_storage, "filename", "") or "")
    _, extension = os.path.splitext(filename)
    if not extension:
        mimetype = getattr(file_storage, "mimetype", None) or ""
        extension = mimetypes.guess_extension(mimetype) or ""
    return extension.lower()


def build_object_name(file_storage) -> str:
    """Upload timestamp in ms plus a short random suffix, keeping the extension."""
    timestamp = int(time.time() * 1000)
    return f"{timestamp}-{uuid.uuid4().hex[:8]}{_extension_for(file_storage)}"


def _get_stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (OSError, ValueError):
        return stream, -1


class AssetSink(ABC):
    """Where uploaded bytes end up. `save` returns the URL clients fetch."""

    name = None

    @abstractmethod
    def save(self, file_storage, object_name=None) -> StoredAsset:
        raise NotImplementedError


class LocalAssetSink(AssetSink):
    name = "local"

    def __init__(self, upload_folder, url_prefix="/uploads", public_base_url=""):
        self.upload_folder = upload_folder
        self.url_prefix = "/" + url_prefix.strip("/")
        self.public_base_url = (public_base_url or "").rstrip("/")

    def url_for(self, object_name: str) -> str:
        return f"{self.public_base_url}{self.url_prefix}/{object_name}"

    def save(self, file_storage, object_name=None) -> StoredAsset:
        object_name = object_name or build_object_name(file_storage)
        absolute_path = os.path.join(self.upload_folder, object_name)

        try:
            os.makedirs(self.upload_folder, exist_ok=True)
            file_storage.stream.seek(0)
            file_storage.save(absolute_path)
        except OSError as e:
            raise AssetStorageError("Failed to store file locally") from e

        logger.info("Stored upload at %s", absolute_path)
        return StoredAsset(url=self.url_for(object_name), object_name=object_name)


class MinioAssetSink(AssetSink):
    """Stores uploads in an S3-compatible bucket.

    With a fallback sink configured, any failure talking to the object host
    stores the file through the fallback instead of failing the upload.
    """

    name = "minio"

    def __init__(self, bucket, public_base_url, client_factory, fallback=None):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.fallback = fallback
        self._client_factory = client_factory
        self._client = None
        self._client_lock = Lock()

    @property
    def client(self):
        with self._client_lock:
            if self._client is None:
                self._client = self._client_factory()
            return self._client

    def url_for(self, object_name: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{object_name}"

    def _put(self, file_storage, object_name):
        minio = self.client
        if not minio.bucket_exists(self.bucket):
            minio.make_bucket(self.bucket)

        stream, length = _get_stream_and_length(file_storage)
        upload_kwargs = {
            "bucket_name": self.bucket,
            "object_name": object_name,
            "data": stream,
            "length": length,
            "content_type": getattr(file_storage, "mimetype", None)
            or "application/octet-stream",
        }
        if length == -1:
            upload_kwargs["part_size"] = MINIO_PART_SIZE

        minio.put_object(**upload_kwargs)

    def save(self, file_storage, object_name=None) -> StoredAsset:
        object_name = object_name or build_object_name(file_storage)

        try:
            self._put(file_storage, object_name)
        except Exception as e:
            if self.fallback is None:
                raise AssetStorageError("Media storage is unavailable") from e
            logger.warning(
                "Object storage failed for %s, using %s sink: %s",
                object_name,
                self.fallback.name,
                e,
            )
            return self.fallback.save(file_storage, object_name=object_name)

        return StoredAsset(url=self.url_for(object_name), object_name=object_name)


def build_minio_client(config):
    timeout = urllib3.Timeout(
        connect=config["MINIO_CONNECT_TIMEOUT"],
        read=config["MINIO_READ_TIMEOUT"],
    )
    http_client = urllib3.PoolManager(
        timeout=timeout,
        retries=False,
        maxsize=config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )
    return Minio(
        config["MINIO_ENDPOINT"],
        access_key=config["MINIO_ACCESS_KEY"],
        secret_key=config["MINIO_SECRET_KEY"],
        secure=config["MINIO_SECURE"],
        http_client=http_client,
    )


def _local_sink_from_config(config):
    return LocalAssetSink(
        upload_folder=config["UPLOAD_FOLDER"],
        url_prefix=config.get("UPLOADS_URL_PREFIX", "/uploads"),
        public_base_url=config.get("APP_PUBLIC_BASE_URL", ""),
    )


def build_asset_sink(config) -> AssetSink:
    local_sink = _local_sink_from_config(config)
    if config["ASSET_SINK"] == "local":
        return local_sink

    public_base_url = config.get("MINIO_PUBLIC_BASE_URL")
    if not public_base_url:
        scheme = "https" if config.get("MINIO_SECURE") else "http"
        public_base_url = f"{scheme}://{config['MINIO_ENDPOINT']}"

    minio_settings = {key: value for key, value in config.items() if key.startswith("MINIO_")}
    fallback = local_sink if config.get("MEDIA_LOCAL_FALLBACK_ENABLED") else None
    return MinioAssetSink(
        bucket=config["MINIO_BUCKET"],
        public_base_url=public_base_url,
        client_factory=lambda: build_minio_client(minio_settings),
        fallback=fallback,
    )


def get_asset_sink() -> AssetSink:
    return current_app.extensions["asset_sink"]
