# budget_workflow/services/storage.py
"""
Physical file stores. Attachment bytes are written by the caller; the rule
engine only needs to check for and delete them when a record is removed.
"""

import os
from functools import lru_cache

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from budget_workflow.config import settings
from budget_workflow.errors import StorageFailure
import structlog

logger = structlog.get_logger()


class LocalFileStore:
    def __init__(self, root: str = ""):
        self.root = root

    def _resolve(self, path: str) -> str:
        if self.root and not os.path.isabs(path):
            return os.path.join(self.root, path)
        return path

    def exists(self, path: str) -> bool:
        return os.path.exists(self._resolve(path))

    def delete(self, path: str) -> None:
        full_path = self._resolve(path)
        try:
            os.remove(full_path)
        except OSError as e:
            raise StorageFailure(f"Failed to delete {full_path}: {e}") from e
        logger.info("local_file_deleted", path=full_path)


class R2FileStore:
    def __init__(self):
        self.s3 = boto3.client(
            "s3",
            endpoint_url=settings.R2_ENDPOINT_URL,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
            region_name="auto",
        )
        self.bucket = settings.R2_BUCKET_NAME

    def exists(self, key: str) -> bool:
        try:
            self.s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageFailure(f"Failed to check {key}: {e}") from e
        except BotoCoreError as e:
            raise StorageFailure(f"Failed to check {key}: {e}") from e
        return True

    def delete(self, key: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageFailure(f"Failed to delete {key}: {e}") from e
        logger.info("r2_deleted", key=key)


@lru_cache()
def get_file_store():
    if settings.STORAGE_BACKEND == "r2":
        return R2FileStore()
    return LocalFileStore(settings.UPLOAD_DIR)
