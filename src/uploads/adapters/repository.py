"""File stores for uploaded case documents following the repository pattern."""

import abc
import logging
from io import BytesIO
from pathlib import Path

from minio import Minio
from minio.error import S3Error

import config

logger = logging.getLogger(__name__)

OBJECT_PREFIX = "cases"


class AbstractFileStore(abc.ABC):
    """Abstract store returning a URL for every saved file."""

    def save(self, file_name: str, data: bytes) -> str:
        url = self._save(file_name, data)
        logger.info(f"Stored upload {file_name} ({len(data)} bytes) at {url}")
        return url

    @abc.abstractmethod
    def _save(self, file_name: str, data: bytes) -> str:
        raise NotImplementedError


class LocalFileStore(AbstractFileStore):
    """Writes uploads into a local directory served under /uploads."""

    def __init__(self, directory: Path, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def _ensure_directory_exists(self):
        self.directory.mkdir(parents=True, exist_ok=True)

    def _save(self, file_name: str, data: bytes) -> str:
        self._ensure_directory_exists()
        (self.directory / file_name).write_bytes(data)
        return f"{self.url_prefix}/{file_name}"


class MinIOFileStore(AbstractFileStore):
    """MinIO implementation for publicly readable uploads."""

    def __init__(self, client: Minio, bucket_name: str, public_url: str):
        self.client = client
        self.bucket_name = bucket_name
        self.public_url = public_url.rstrip("/")
        self._bucket_checked = False

    def _ensure_bucket_exists(self):
        """Ensure the bucket exists, create if it doesn't."""
        if self._bucket_checked:
            return
        try:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
                logger.info(f"Created MinIO bucket: {self.bucket_name}")
        except S3Error as e:
            logger.error(f"Failed to ensure bucket exists: {e}")
            raise
        self._bucket_checked = True

    def _save(self, file_name: str, data: bytes) -> str:
        self._ensure_bucket_exists()
        object_key = f"{OBJECT_PREFIX}/{file_name}"
        try:
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=object_key,
                data=BytesIO(data),
                length=len(data),
                content_type="application/pdf"
            )
        except S3Error as e:
            logger.error(f"Failed to store upload {object_key}: {e}")
            raise
        return f"{self.public_url}/{self.bucket_name}/{object_key}"


def create_file_store() -> AbstractFileStore:
    """Resolve the upload backend independently of the case store backend."""
    if config.blob_storage_configured():
        minio_config = config.get_minio_config()
        client = Minio(
            endpoint=minio_config["endpoint"],
            access_key=minio_config["access_key"],
            secret_key=minio_config["secret_key"],
            secure=minio_config["secure"]
        )
        logger.info(f"Uploads go to MinIO bucket {minio_config['bucket_name']} at {minio_config['endpoint']}")
        return MinIOFileStore(client, minio_config["bucket_name"], minio_config["public_url"])

    uploads_dir = config.get_uploads_dir()
    logger.info(f"Uploads go to local directory {uploads_dir}")
    return LocalFileStore(uploads_dir)
