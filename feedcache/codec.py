"""
Video <-> Document codec.

Encoding raises DocumentError only for text that cannot be stored as UTF-8.
Decoding is permissive about extra or missing optional fields and returns
None for anything that is not a usable video.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from feedcache.document import Document, DocumentType
from feedcache.models import Video

logger = logging.getLogger(__name__)


class VideoCodec:
    """Converts videos to cache documents and back."""

    def encode(self, video: Video) -> Document:
        return Document(video.model_dump(mode="json", by_alias=True, exclude_none=True))

    def decode(self, document: Document) -> Optional[Video]:
        if document.type is not DocumentType.OBJECT:
            logger.debug(f"Cannot decode video from {document.type.value} document")
            return None
        try:
            return Video.model_validate(document.to_python())
        except ValidationError as e:
            logger.debug(f"Discarding malformed video document: {e.error_count()} error(s)")
            return None


default_codec = VideoCodec()


def encode_video(video: Video) -> Document:
    """Encode a video with the default codec."""
    return default_codec.encode(video)


def decode_video(document: Document) -> Optional[Video]:
    """Decode a video with the default codec."""
    return default_codec.decode(document)
