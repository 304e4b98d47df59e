# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# The storage gateway for every media asset. One public bucket, one folder
# per record type:
#   products/  gallery/  stories/  team-members/
#
# Object keys are "{folder}/{epoch_ms}-{filename}" so uploads never overwrite.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import quote

from app.config import settings
from app.exceptions import UploadFailedError
from lib.supabase_client import SupabaseClient
from lib.utils import epoch_millis, sanitize_filename

logger = logging.getLogger(__name__)

PRODUCTS_FOLDER = "products"
GALLERY_FOLDER = "gallery"
STORIES_FOLDER = "stories"
TEAM_MEMBERS_FOLDER = "team-members"


def build_upload_path(folder: str, filename: str, timestamp_ms: int | None = None) -> str:
    """
    Build a collision-resistant object key.

    Example:
        build_upload_path("gallery", "sofa set.png", 1700000000000)
        # "gallery/1700000000000-sofa-set.png"
    """
    if timestamp_ms is None:
        timestamp_ms = epoch_millis()
    return f"{folder.strip('/')}/{timestamp_ms}-{sanitize_filename(filename)}"


@dataclass
class CleanupResult:
    """
    Outcome of removing a set of objects.

    A partial failure is reported here and logged; it never blocks the
    record delete that triggered it.
    """
    removed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {"removed": sorted(self.removed), "failed": dict(self.failed)}


class StorageGateway:
    """
    Service for Supabase Storage operations on the media bucket.

    Args:
        bucket: Bucket name (defaults to settings.STORAGE_BUCKET)
        client: Optional Supabase client; the shared singleton is used otherwise
    """

    def __init__(self, bucket: str | None = None, client=None):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    @staticmethod
    def build_upload_path(folder: str, filename: str, timestamp_ms: int | None = None) -> str:
        return build_upload_path(folder, filename, timestamp_ms)

    def upload(self, path: str, blob: bytes, content_type: str | None = None) -> str:
        """
        Upload one object. Never overwrites an existing key.

        Args:
            path: Object key (see build_upload_path)
            blob: File content
            content_type: MIME type stored with the object

        Returns:
            The storage path that was written

        Raises:
            UploadFailedError: If the bucket rejects the upload
        """
        try:
            self._bucket().upload(
                path=path,
                file=blob,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            raise UploadFailedError(path, str(e))

        logger.info(f"Uploaded file to storage: {path}")
        return path

    def resolve_public_url(self, path: str) -> str:
        """
        Public URL for a storage path.

        Deterministic and offline; a missing object still gets a well-formed
        URL that simply 404s when fetched.
        """
        try:
            url = self._bucket().get_public_url(path)
        except Exception as e:
            logger.warning(f"Falling back to built public URL for {path}: {e}")
            url = None

        if not isinstance(url, str) or not url:
            base = settings.SUPABASE_URL.rstrip("/")
            url = f"{base}/storage/v1/object/public/{self.bucket}/{quote(path)}"
        return url.rstrip("?")

    def remove(self, paths: Iterable[str]) -> CleanupResult:
        """
        Remove objects one by one, collecting per-path results.

        Never raises: failures are logged and returned.
        """
        result = CleanupResult()
        for path in sorted(set(p for p in paths if p)):
            try:
                response = self._bucket().remove([path])
            except Exception as e:
                logger.warning(f"Failed to delete {path} from storage: {e}")
                result.failed[path] = str(e)
                continue

            # The API answers with the list of objects it actually deleted
            if isinstance(response, list) and not response:
                logger.warning(f"Nothing deleted for {path}: object not found")
                result.failed[path] = "object not found"
                continue

            result.removed.append(path)
            logger.info(f"Deleted file from storage: {path}")

        if result.failed:
            logger.warning(
                f"Storage cleanup partially failed: {len(result.failed)} of "
                f"{len(result.failed) + len(result.removed)} paths not removed"
            )
        return result

