"""Structural checks on untyped Kubernetes objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _is_mapping_or_none(value: Any) -> bool:
    return value is None or isinstance(value, Mapping)


def _is_str_or_none(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _is_container_list(value: Any) -> bool:
    if value is None:
        return True
    if not isinstance(value, list):
        return False
    return all(
        isinstance(item, Mapping)
        and _is_str_or_none(item.get("image"))
        and _is_str_or_none(item.get("name"))
        for item in value
    )


def _is_pod_template(template: Any) -> bool:
    if not isinstance(template, Mapping):
        return False
    if not _is_mapping_or_none(template.get("metadata")):
        return False
    spec = template.get("spec")
    if spec is None:
        return True
    if not isinstance(spec, Mapping):
        return False
    if not (_is_container_list(spec.get("containers")) and _is_container_list(spec.get("initContainers"))):
        return False
    volumes = spec.get("volumes")
    if volumes is not None and not (
        isinstance(volumes, list) and all(isinstance(v, Mapping) for v in volumes)
    ):
        return False
    return True


def is_pod_specable(obj: Mapping[str, Any]) -> dict[str, Any] | None:
    """Return the pod template under ``spec.template``, or None when there is none."""
    spec = obj.get("spec")
    if not isinstance(spec, Mapping) or "template" not in spec:
        return None
    template = spec["template"]
    if template is None:
        return {}
    return template if _is_pod_template(template) else None


def has_status_object(obj: Mapping[str, Any]) -> bool:
    """Tell whether the object has a ``status`` mapping."""
    return isinstance(obj.get("status"), Mapping)