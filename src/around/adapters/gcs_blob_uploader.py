"""Google Cloud Storage image uploader."""

import asyncio
import logging
from dataclasses import dataclass
from typing import BinaryIO

import requests
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from around.domain.errors import BlobStoreError
from around.services.posts import BlobUploader

_logger = logging.getLogger(__name__)


@dataclass
class GcsBlobUploader(BlobUploader):
    """Uploads images to GCS and publishes them for anonymous reads."""

    client: storage.Client

    @classmethod
    def create(cls, project: str | None = None) -> "GcsBlobUploader":
        """Create an uploader with a default-credentials GCS client."""
        return cls(client=storage.Client(project=project))

    async def upload(
        self,
        stream: BinaryIO,
        bucket_name: str,
        object_id: str,
        content_type: str | None = None,
    ) -> str:
        """Store the stream, make it public-read and return its media link."""
        return await asyncio.to_thread(
            self._upload, stream, bucket_name, object_id, content_type
        )

    def _upload(
        self,
        stream: BinaryIO,
        bucket_name: str,
        object_id: str,
        content_type: str | None,
    ) -> str:
        try:
            bucket = self.client.get_bucket(bucket_name)
            blob = bucket.blob(object_id)
            # The object only exists once the upload completes.
            blob.upload_from_file(stream, content_type=content_type)
            blob.make_public()
            blob.reload()
        except (GoogleAPIError, GoogleAuthError, requests.RequestException) as exc:
            raise BlobStoreError(
                f"Upload of {object_id} to {bucket_name} failed"
            ) from exc
        if not blob.media_link:
            raise BlobStoreError(f"No media link for {object_id} in {bucket_name}")
        _logger.info("Image saved to GCS: %s", blob.media_link)
        return blob.media_link

    def close(self) -> None:
        """Close the underlying GCS client."""
        self.client.close()
