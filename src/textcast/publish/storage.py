"""Durable storage for assembled audio."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol

from google.cloud import storage

from textcast.errors import PublishFailed
from textcast.models import Artifact, ContentRecord, PublishedObject
from textcast.utils.files import object_name_for

LOGGER = logging.getLogger(__name__)

AUDIO_CONTENT_TYPE = "audio/mpeg"


class ObjectStore(Protocol):
    def upload(
        self,
        local_path: Path,
        object_name: str,
        *,
        metadata: Mapping[str, str],
        content_type: str,
        public: bool,
    ) -> str | None:
        """Store the file and return its public url, if it has one."""
        ...


class GCSObjectStore:
    """Google Cloud Storage bucket as an object store."""

    def __init__(self, bucket_name: str, client: Any | None = None, *, timeout: float | None = None) -> None:
        if not bucket_name:
            raise ValueError("A bucket name is required")
        self.bucket_name = bucket_name
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket_name)
        self.timeout = timeout

    def upload(
        self,
        local_path: Path,
        object_name: str,
        *,
        metadata: Mapping[str, str],
        content_type: str,
        public: bool,
    ) -> str | None:
        blob = self._bucket.blob(object_name)
        blob.metadata = dict(metadata)
        kwargs: Dict[str, Any] = {"content_type": content_type}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        blob.upload_from_filename(str(local_path), **kwargs)
        if public:
            blob.make_public()
            return blob.public_url
        return None


def build_object_metadata(record: ContentRecord) -> Dict[str, str]:
    """Metadata read back later when the podcast feed is generated."""
    fields = {
        "title": record.title,
        "author": record.author,
        "excerpt": record.excerpt,
        "url": record.source_url,
        "datePublished": record.published_date,
        "leadImageUrl": record.lead_image_url,
    }
    return {key: value for key, value in fields.items() if value}


class Publisher:
    """Uploads an artifact under a name derived from its source url."""

    def __init__(
        self,
        store: ObjectStore,
        *,
        extension: str = ".mp3",
        content_type: str = AUDIO_CONTENT_TYPE,
        public: bool = True,
    ) -> None:
        self.store = store
        self.extension = extension
        self.content_type = content_type
        self.public = public

    def publish(self, artifact: Artifact, record: ContentRecord) -> PublishedObject:
        object_name = object_name_for(record.source_url, self.extension)
        metadata = build_object_metadata(record)
        try:
            url = self.store.upload(
                artifact.path,
                object_name,
                metadata=metadata,
                content_type=self.content_type,
                public=self.public,
            )
        except Exception as exc:
            raise PublishFailed(f"Could not upload {artifact.path} as {object_name}: {exc}") from exc

        LOGGER.info("Published %s", object_name)
        return PublishedObject(object_name=object_name, metadata=metadata, public=self.public, url=url)
