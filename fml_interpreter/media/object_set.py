"""
Out-of-band binary objects delivered alongside a page.

The transport hands the core a mapping from object name to payload bytes, or
to :data:`MISSING` when the server could not supply an object. Payloads are
decoded lazily with Pillow, once per name, to learn their pixel size.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Dict, Iterable, Mapping, Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class _Missing:
    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

Payload = Union[bytes, _Missing]


@dataclass(frozen=True, slots=True)
class BinaryObject:
    name: str
    data: bytes = field(repr=False)
    width: int
    height: int
    format: Optional[str] = None

    @property
    def digest(self) -> str:
        return hashlib.md5(self.data).hexdigest()

    @property
    def aspect_ratio(self) -> float:
        """Height over width."""
        return self.height / self.width if self.width else 0.0


class ObjectSet:
    """
    Name -> decoded object lookup for one page.

    Decoding results are memoised per instance; an instance may be shared by
    several layout runs of the same page.
    """

    def __init__(self, payloads: Optional[Mapping[str, Payload]] = None):
        self._payloads: Dict[str, Payload] = dict(payloads or {})
        self._decoded: Dict[str, Optional[BinaryObject]] = {}

    @classmethod
    def coerce(cls, objects: Union["ObjectSet", Mapping[str, Payload], None]) -> "ObjectSet":
        if isinstance(objects, ObjectSet):
            return objects
        return cls(objects)

    def missing_from(self, wanted: Iterable[str]) -> list[str]:
        """Names in ``wanted`` that this set cannot supply as bytes."""
        return [name for name in wanted if not isinstance(self._payloads.get(name), bytes)]

    def get(self, name: str) -> Optional[BinaryObject]:
        """
        Decoded object for ``name``, or ``None`` when the object is absent,
        marked missing, or not a decodable image.
        """
        if name in self._decoded:
            return self._decoded[name]

        payload = self._payloads.get(name, MISSING)
        decoded: Optional[BinaryObject] = None
        if isinstance(payload, bytes):
            decoded = self._decode(name, payload)
        self._decoded[name] = decoded
        return decoded

    @staticmethod
    def _decode(name: str, data: bytes) -> Optional[BinaryObject]:
        try:
            with Image.open(BytesIO(data)) as image:
                width, height = image.size
                image_format = image.format
        except (UnidentifiedImageError, OSError) as exc:
            logger.debug("Object %r is not a decodable image: %s", name, exc)
            return None
        if width <= 0 or height <= 0:
            return None
        return BinaryObject(name, data, width, height, image_format)
