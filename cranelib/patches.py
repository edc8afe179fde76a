"""Patches that strip server-populated fields and edit annotations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from cranelib.jsonpatch import Operation

FIELDS_TO_STRIP: tuple[tuple[str, ...], ...] = (
    ("metadata", "uid"),
    ("metadata", "selfLink"),
    ("metadata", "resourceVersion"),
    ("metadata", "creationTimestamp"),
    ("metadata", "generation"),
    ("metadata", "managedFields"),
    ("status",),
)

ANNOTATIONS_PATH = "/metadata/annotations/"
POD_NODE_NAME = "/spec/nodeName"
POD_NODE_SELECTOR = "/spec/nodeSelector"
POD_PRIORITY = "/spec/priority"


def _has_nested_field(obj: Mapping[str, Any], fields: Sequence[str]) -> bool:
    current: Any = obj
    for depth, name in enumerate(fields):
        if not isinstance(current, Mapping):
            where = "." + ".".join(fields[:depth])
            raise ValueError(
                f"{where} accessor error: {current!r} is of the type "
                f"{type(current).__name__}, expected a mapping"
            )
        if name not in current:
            return False
        current = current[name]
    return True


def strip_fields(obj: Mapping[str, Any]) -> list[Operation]:
    """Remove the metadata and status fields the server fills in."""
    return [
        Operation(op="remove", path="/" + "/".join(fields))
        for fields in FIELDS_TO_STRIP
        if _has_nested_field(obj, fields)
    ]


def add_annotations(annotations: Mapping[str, str]) -> list[Operation]:
    """Add every annotation of the mapping."""
    return [
        Operation(op="add", path=ANNOTATIONS_PATH + key, value=value)
        for key, value in annotations.items()
    ]


def remove_annotations(annotations: Iterable[str]) -> list[Operation]:
    """Remove every named annotation."""
    return [Operation(op="remove", path=ANNOTATIONS_PATH + name) for name in annotations]


def remove_pod_fields() -> list[Operation]:
    """Remove the scheduling fields of a pod."""
    return [
        Operation(op="remove", path=POD_NODE_NAME),
        Operation(op="remove", path=POD_NODE_SELECTOR),
        Operation(op="remove", path=POD_PRIORITY),
    ]


def rename_pvc_templates(
    templates: Iterable[Mapping[str, Any]] | None,
    rename_map: Mapping[str, str] | None,
    path: str,
) -> list[Operation]:
    """Rename the volume claim templates whose name is in the rename map.

    ``path`` holds one ``{}`` placeholder for the template's index.
    """
    if not rename_map:
        return []
    patch = []
    for index, template in enumerate(templates or ()):
        metadata = template.get("metadata") if isinstance(template, Mapping) else None
        name = metadata.get("name") if isinstance(metadata, Mapping) else None
        name = name if isinstance(name, str) else ""
        if name in rename_map:
            patch.append(Operation(op="replace", path=path.format(index), value=rename_map[name]))
    return patch