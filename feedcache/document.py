"""
Structured document values stored in the cache.

A Document is a JSON value tagged with its kind. Accessors are strict: asking
for the wrong kind returns None instead of raising, so callers can walk
untrusted payloads read back from disk without guarding every step.
"""

import copy
import json
import math
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from feedcache.exceptions import DocumentError


# Cached feeds nest a handful of levels; anything far deeper is corrupt
MAX_DEPTH = 100


class DocumentType(str, Enum):
    """Kinds of document values."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


def _check_text(text: str, value: Any) -> None:
    # Lone surrogates parse from JSON escapes but cannot be written back as UTF-8
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DocumentError(f"Text is not encodable as UTF-8: {e}", value) from e


def _normalize(value: Any, depth: int = 0) -> tuple[DocumentType, Any]:
    """Copy a Python value into plain JSON containers and classify it."""
    if depth > MAX_DEPTH:
        raise DocumentError(f"Document nests deeper than {MAX_DEPTH} levels")
    if isinstance(value, Document):
        return _normalize(value._value, depth)
    if value is None:
        return DocumentType.NULL, None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return DocumentType.BOOL, value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise DocumentError(f"Non-finite number is not a document value: {value!r}", value)
        return DocumentType.NUMBER, value
    if isinstance(value, str):
        _check_text(value, value)
        return DocumentType.STRING, value
    if isinstance(value, dict):
        normalized: Dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise DocumentError(f"Object keys must be strings, got {type(key).__name__}", value)
            _check_text(key, value)
            normalized[key] = _normalize(item, depth + 1)[1]
        return DocumentType.OBJECT, normalized
    if isinstance(value, (list, tuple)):
        return DocumentType.ARRAY, [_normalize(item, depth + 1)[1] for item in value]
    raise DocumentError(f"Unsupported document value type: {type(value).__name__}", value)


class Document:
    """
    Immutable JSON value with kind-checked accessors.

    Usage:
        doc = Document({"videos": [{"videoId": "abc"}]})
        doc.get("videos").array()      # [Document({...})]
        doc["missing"]["deeper"].string()  # None
    """

    __slots__ = ("type", "_value")

    def __init__(self, value: Any = None):
        try:
            self.type, self._value = _normalize(value)
        except RecursionError as e:
            raise DocumentError("Document is nested too deeply", None) from e

    @classmethod
    def null(cls) -> "Document":
        return cls(None)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Optional["Document"]:
        """Parse JSON text; None if it is not valid JSON."""
        try:
            return cls(json.loads(text))
        except (ValueError, TypeError, RecursionError):
            return None

    def to_json(self) -> str:
        return json.dumps(self._value, ensure_ascii=False, separators=(",", ":"))

    def to_python(self) -> Any:
        """Plain Python value (deep copy)."""
        return copy.deepcopy(self._value)

    # Strict accessors

    def object(self) -> Optional[Dict[str, "Document"]]:
        if self.type is not DocumentType.OBJECT:
            return None
        return {key: Document(item) for key, item in self._value.items()}

    def array(self) -> Optional[List["Document"]]:
        if self.type is not DocumentType.ARRAY:
            return None
        return [Document(item) for item in self._value]

    def string(self) -> Optional[str]:
        return self._value if self.type is DocumentType.STRING else None

    def number(self) -> Optional[Union[int, float]]:
        return self._value if self.type is DocumentType.NUMBER else None

    def integer(self) -> Optional[int]:
        """Number as int; None for non-numbers and fractional values."""
        if self.type is not DocumentType.NUMBER:
            return None
        if isinstance(self._value, float):
            return int(self._value) if self._value.is_integer() else None
        return self._value

    def boolean(self) -> Optional[bool]:
        return self._value if self.type is DocumentType.BOOL else None

    @property
    def is_null(self) -> bool:
        return self.type is DocumentType.NULL

    def get(self, key: str) -> Optional["Document"]:
        """Member of an object document, or None."""
        if self.type is not DocumentType.OBJECT or key not in self._value:
            return None
        return Document(self._value[key])

    def __getitem__(self, key: Union[str, int]) -> "Document":
        # Missing members chain as null documents
        if isinstance(key, str):
            member = self.get(key)
            return member if member is not None else Document.null()
        if self.type is DocumentType.ARRAY and -len(self._value) <= key < len(self._value):
            return Document(self._value[key])
        return Document.null()

    def __contains__(self, key: str) -> bool:
        return self.type is DocumentType.OBJECT and key in self._value

    def __len__(self) -> int:
        if self.type in (DocumentType.OBJECT, DocumentType.ARRAY):
            return len(self._value)
        return 0

    def __iter__(self) -> Iterator["Document"]:
        return iter(self.array() or [])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.type is other.type and self._value == other._value

    def __hash__(self) -> int:
        return hash((self.type, self.to_json()))

    def __repr__(self) -> str:
        return f"Document({self.type.value}: {self.to_json()})"
