"""
File storage abstraction for CV files and staff avatars.

Local filesystem for development, S3 (or an S3-compatible store such as
MinIO, via S3_ENDPOINT_URL) for production. Callers only ever see object
keys of the form "<folder>/<uuid>_<filename>".
"""

import logging
import os
import uuid
from io import BytesIO
from typing import BinaryIO, Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from recruitflow.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'pdf': 'application/pdf',
    'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'doc': 'application/msword',
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'webp': 'image/webp',
}


class StorageError(Exception):
    """Raised when the backend cannot store or return an object."""


def get_content_type(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = filename.lower().rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


def build_object_key(folder: str, filename: str) -> str:
    safe_name = os.path.basename(filename).replace(" ", "_")
    return f"{folder}/{uuid.uuid4()}_{safe_name}"


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "cvs") -> str:
        """Store file and return its object key"""
        raise NotImplementedError

    def download_file(self, object_key: str) -> BytesIO:
        """Return object contents as BytesIO"""
        raise NotImplementedError

    def delete_file(self, object_key: str) -> bool:
        """Delete object; False if it could not be removed"""
        raise NotImplementedError

    def file_exists(self, object_key: str) -> bool:
        raise NotImplementedError

    def check(self) -> str:
        """Verify the backend is reachable; return a short description or raise"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def _path(self, object_key: str) -> str:
        return os.path.join(self.base_dir, object_key)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "cvs") -> str:
        object_key = build_object_key(folder, filename)
        path = self._path(object_key)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        with open(path, "wb") as buffer:
            buffer.write(file.read())

        return object_key

    def download_file(self, object_key: str) -> BytesIO:
        path = self._path(object_key)
        if not os.path.exists(path):
            raise StorageError(f"Object not found: {object_key}")
        with open(path, "rb") as f:
            return BytesIO(f.read())

    def delete_file(self, object_key: str) -> bool:
        path = self._path(object_key)
        try:
            if os.path.exists(path):
                os.remove(path)
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {object_key}: {e}")
            return False

    def file_exists(self, object_key: str) -> bool:
        return os.path.exists(self._path(object_key))

    def check(self) -> str:
        if not os.access(self.base_dir, os.W_OK):
            raise StorageError(f"{self.base_dir} is not writable")
        return "Local storage writable"


class S3Storage(StorageBackend):
    """S3 / MinIO storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        client_kwargs = {'region_name': settings.AWS_REGION}
        if settings.S3_ENDPOINT_URL:
            client_kwargs['endpoint_url'] = settings.S3_ENDPOINT_URL

        # Without explicit keys boto3 falls back to IAM roles / instance profile
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            client_kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
            client_kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY

        self.s3_client = boto3.client('s3', **client_kwargs)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "cvs") -> str:
        object_key = build_object_key(folder, filename)

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                object_key,
                ExtraArgs={'ContentType': get_content_type(filename)}
            )
            return object_key

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading {object_key} to S3: {e}")
            raise StorageError(f"Failed to upload file: {e}")

    def download_file(self, object_key: str) -> BytesIO:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=object_key)
            return BytesIO(response['Body'].read())

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error downloading {object_key} from S3: {e}")
            raise StorageError(f"Failed to download file: {e}")

    def delete_file(self, object_key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=object_key)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting {object_key} from S3: {e}")
            return False

    def file_exists(self, object_key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=object_key)
            return True
        except ClientError:
            return False

    def check(self) -> str:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Bucket {self.bucket_name} not reachable: {e}")
        return "S3 storage accessible"


def get_storage() -> StorageBackend:
    """Get storage backend based on USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.LOCAL_STORAGE_DIR)


def delete_quietly(object_key: Optional[str]) -> None:
    """Remove an object after its row is gone; a leftover file is only logged."""
    if object_key and not storage.delete_file(object_key):
        logger.warning(f"Stored object {object_key} was not removed")


# Singleton instance
storage = get_storage()
