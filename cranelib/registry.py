"""Container image registry replacement."""

from __future__ import annotations

from collections.abc import Mapping

from cranelib.jsonpatch import Operation


def update_image_registry(replacements: Mapping[str, str], old_image: str) -> str | None:
    """Return the image with its longest matching prefix replaced, or None."""
    parts = old_image.split("/")
    for end in range(len(parts), 0, -1):
        replacement = replacements.get("/".join(parts[:end]))
        if replacement is None:
            continue
        if end == len(parts):
            return replacement
        return f"{replacement}/{'/'.join(parts[end:])}"
    return None


def update_image(container_image_path: str, updated_image: str) -> list[Operation]:
    """Build a patch that sets the image at the given path."""
    return [Operation(op="replace", path=container_image_path, value=updated_image)]