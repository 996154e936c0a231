"""
Document <-> bytes transformer for the persistent tier.
"""

from typing import Optional

from feedcache.document import Document
from feedcache.exceptions import DocumentError


class JSONTransformer:
    """Encodes documents as UTF-8 JSON."""

    encoding = "utf-8"

    def to_data(self, document: Document) -> bytes:
        return document.to_json().encode(self.encoding)

    def from_data(self, data: bytes) -> Document:
        """
        Decode stored bytes.

        Raises:
            DocumentError: If the bytes are not valid UTF-8 JSON.
        """
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentError(f"Stored payload is not {self.encoding}: {e}") from e

        document: Optional[Document] = Document.from_json(text)
        if document is None:
            raise DocumentError("Stored payload is not valid JSON")
        return document


json_transformer = JSONTransformer()
