"""JSON Patch operations and order-insensitive comparison of patches."""

from __future__ import annotations

import enum
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


class PatchError(ValueError):
    """Raised when a JSON Patch document or operation cannot be decoded."""


class _Missing(enum.Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING
"""Marker for an operation that carries no ``value`` member."""


@dataclass(frozen=True)
class Operation:
    """A single JSON Patch operation."""

    op: str
    path: str
    value: Any = MISSING
    from_: str | None = None

    @property
    def kind(self) -> str:
        return self.op

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING

    def to_dict(self) -> dict[str, Any]:
        """Return the operation as a JSON-ready mapping."""
        data: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.from_ is not None:
            data["from"] = self.from_
        if self.has_value:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Operation:
        """Build an operation from a decoded JSON object."""
        if not isinstance(data, Mapping):
            raise PatchError(f"patch operation must be an object, got {data!r}")
        op = data.get("op")
        if not isinstance(op, str):
            raise PatchError(f"patch operation has no valid 'op': {dict(data)!r}")
        path = data.get("path")
        if not isinstance(path, str):
            raise PatchError(f"patch operation has no valid 'path': {dict(data)!r}")
        source = data.get("from")
        if source is not None and not isinstance(source, str):
            raise PatchError(f"patch operation has an invalid 'from': {source!r}")
        value = data["value"] if "value" in data else MISSING
        return cls(op=op, path=path, value=value, from_=source)


def decode_patch(data: str | bytes) -> list[Operation]:
    """Decode a JSON Patch document into a list of operations."""
    try:
        document = json.loads(data)
    except ValueError as exc:
        raise PatchError(f"invalid JSON patch: {exc}") from exc
    if not isinstance(document, list):
        raise PatchError("a JSON patch must be an array of operations")
    return [Operation.from_dict(item) for item in document]


def encode_patch(patch: Iterable[Operation]) -> str:
    """Encode operations as a compact JSON Patch document."""
    return json.dumps([operation.to_dict() for operation in patch], separators=(",", ":"))


def _json_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(map(_json_equal, left, right))
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(_json_equal(left[k], right[k]) for k in left)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if left is None or right is None:
        return left is None and right is None
    return left == right


def equal_operation(operation1: Operation, operation2: Operation) -> bool:
    """Tell whether two operations have the same kind, path, source and value."""
    if operation1.op != operation2.op or operation1.path != operation2.path:
        return False
    if operation1.op in ("move", "copy"):
        if operation1.from_ is None or operation2.from_ is None:
            return False
        if operation1.from_ != operation2.from_:
            return False
    value1 = operation1.value if operation1.has_value else None
    value2 = operation2.value if operation2.has_value else None
    return _json_equal(value1, value2)


def equal(patch1: Iterable[Operation], patch2: Iterable[Operation]) -> bool:
    """Tell whether two patches hold the same operations, in any order."""
    first, second = list(patch1), list(patch2)
    found = sum(1 for a in first for b in second if equal_operation(a, b))
    return found == len(first) == len(second)