import logging
import os
from io import BytesIO
from pathlib import Path

from minio import Minio
from minio.error import S3Error

from ..core.config import settings
from ..services.exceptions import NotFoundError
from ..utils.file_utils import generate_object_name, is_plain_object_name

logger = logging.getLogger(__name__)

# S3 error codes meaning "no such object"
_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchBucket"}


class BlobStore:
    """
    Stores attachment bytes outside the relational store under generated names.

    Implementations guarantee:
    - store() never reuses a name and never derives it from the caller's filename
      beyond the extension;
    - retrieve() raises NotFoundError for unknown names;
    - delete() is idempotent and never raises: failures are logged and reported
      by returning False.
    """

    def store(self, content: bytes, content_type: str, filename: str | None = None) -> str:
        raise NotImplementedError

    def retrieve(self, name: str) -> bytes:
        raise NotImplementedError

    def delete(self, name: str) -> bool:
        raise NotImplementedError

    def ensure_ready(self) -> None:
        """Prepare the backing storage (directory or bucket). Called on startup."""
        pass


class LocalBlobStore(BlobStore):
    """Blob store backed by a directory on the local filesystem."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root).expanduser()

    def _path_for(self, name: str) -> Path:
        if not is_plain_object_name(name):
            raise NotFoundError(f"Image not found: {name}")
        return self.root / name

    def ensure_ready(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def store(self, content: bytes, content_type: str, filename: str | None = None) -> str:
        self.ensure_ready()
        name = generate_object_name(filename, content_type)
        path = self.root / name
        # "xb" refuses to overwrite, so a name clash can never clobber another record's image
        with open(path, "xb") as f:
            f.write(content)
        logger.info(f"Stored blob '{name}' ({len(content)} bytes, {content_type}) in {self.root}")
        return name

    def retrieve(self, name: str) -> bytes:
        path = self._path_for(name)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(f"Image not found: {name}")

    def delete(self, name: str) -> bool:
        try:
            path = self._path_for(name)
        except NotFoundError:
            logger.warning(f"Refusing to delete blob with invalid name '{name}'")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.error(f"Failed to delete blob '{name}' from {self.root}: {e}")
            return False
        logger.info(f"Deleted blob '{name}' from {self.root}")
        return True


class MinioBlobStore(BlobStore):
    """Blob store backed by a Minio (S3-compatible) bucket."""

    def __init__(self, client: Minio, bucket_name: str):
        self.client = client
        self.bucket_name = bucket_name

    def ensure_ready(self) -> None:
        """
        Checks if the image bucket exists in Minio and creates it if it doesn't.
        """
        found = self.client.bucket_exists(self.bucket_name)
        if not found:
            self.client.make_bucket(self.bucket_name)
            logger.info(f"Successfully created Minio bucket: {self.bucket_name}")
        else:
            logger.info(f"Minio bucket '{self.bucket_name}' already exists.")

    def store(self, content: bytes, content_type: str, filename: str | None = None) -> str:
        name = generate_object_name(filename, content_type)
        self.client.put_object(
            bucket_name=self.bucket_name,
            object_name=name,
            data=BytesIO(content),
            length=len(content),
            content_type=content_type
        )
        logger.info(f"Stored blob '{name}' ({len(content)} bytes, {content_type}) in bucket {self.bucket_name}")
        return name

    def retrieve(self, name: str) -> bytes:
        if not is_plain_object_name(name):
            raise NotFoundError(f"Image not found: {name}")

        try:
            response = self.client.get_object(
                bucket_name=self.bucket_name,
                object_name=name
            )
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                raise NotFoundError(f"Image not found: {name}")
            raise

        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    def delete(self, name: str) -> bool:
        if not is_plain_object_name(name):
            logger.warning(f"Refusing to delete blob with invalid name '{name}'")
            return False

        try:
            # S3 deletes are idempotent: removing a missing key succeeds.
            self.client.remove_object(self.bucket_name, name)
        except Exception as e:
            logger.error(f"Failed to delete blob '{name}' from bucket {self.bucket_name}: {e}")
            return False
        logger.info(f"Deleted blob '{name}' from bucket {self.bucket_name}")
        return True


def create_blob_store() -> BlobStore:
    """Build the blob store selected by BLOB_STORE_BACKEND."""
    if settings.BLOB_STORE_BACKEND == "minio":
        if not all([settings.MINIO_ENDPOINT, settings.MINIO_ROOT_USER, settings.MINIO_ROOT_PASSWORD]):
            raise ValueError("Minio configuration is missing. Please set MINIO_ENDPOINT, MINIO_ROOT_USER and MINIO_ROOT_PASSWORD.")
        minio_client = Minio(
            endpoint=settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ROOT_USER,
            secret_key=settings.MINIO_ROOT_PASSWORD,
            secure=settings.MINIO_SECURE
        )
        return MinioBlobStore(minio_client, settings.MINIO_BUCKET_MANUSCRIPT_IMAGES)

    root = Path(settings.UPLOAD_DIR).expanduser() / settings.UPLOAD_MANUSCRIPTS_SUBDIR
    return LocalBlobStore(root)


_blob_store: BlobStore | None = None

def get_blob_store() -> BlobStore:
    """FastAPI dependency to get the configured blob store."""
    global _blob_store
    if _blob_store is None:
        _blob_store = create_blob_store()
    return _blob_store
