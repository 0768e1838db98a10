"""Binary objects referenced by pages."""

from .object_set import MISSING, BinaryObject, ObjectSet

__all__ = ["MISSING", "BinaryObject", "ObjectSet"]
