"""PersistentVolumeClaim rename maps and the patches that apply them."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from cranelib.jsonpatch import Operation

PVC_PATH_CRON_JOB = "/spec/jobTemplate/spec/template/spec/volumes/{}/persistentVolumeClaim/claimName"
PVC_PATH_POD = "/spec/volumes/{}/persistentVolumeClaim/claimName"
PVC_PATH_GENERIC = "/spec/template/spec/volumes/{}/persistentVolumeClaim/claimName"
PVC_PATH_TEMPLATE = "/spec/volumeClaimTemplates/{}/metadata/name"

_DNS1123_LABEL_FMT = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
DNS1123_SUBDOMAIN_FMT = _DNS1123_LABEL_FMT + r"(\." + _DNS1123_LABEL_FMT + r")*"
DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_SUBDOMAIN_RE = re.compile(DNS1123_SUBDOMAIN_FMT)
_SUBDOMAIN_ERROR_MSG = (
    "a lowercase RFC 1123 subdomain must consist of lower case alphanumeric "
    "characters, '-' or '.', and must start and end with an alphanumeric character"
)


def is_dns1123_subdomain(value: str) -> list[str]:
    """Return why ``value`` is not an RFC 1123 subdomain; empty when it is one."""
    errors = []
    if len(value) > DNS1123_SUBDOMAIN_MAX_LENGTH:
        errors.append(f"must be no more than {DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _SUBDOMAIN_RE.fullmatch(value):
        errors.append(
            f"{_SUBDOMAIN_ERROR_MSG} (e.g. 'example.com', "
            f"regex used for validation is '{DNS1123_SUBDOMAIN_FMT}')"
        )
    return errors


def _check_name(name: str, pair: str) -> None:
    errors = is_dns1123_subdomain(name)
    if errors:
        raise ValueError(f"Invalid PVC remap: {pair}, {','.join(errors)}")


def process_pvc_map(pvc_string: str) -> dict[str, str]:
    """Parse ``old:new`` pairs separated by commas into a rename map."""
    renames: dict[str, str] = {}
    for pair in pvc_string.split(","):
        parts = pair.split(":")
        _check_name(parts[0], pair)
        if len(parts) < 2:
            raise ValueError(f"Invalid PVC remap: {pair}, missing ':' separator")
        _check_name(parts[1], pair)
        renames[parts[0]] = parts[1]
    return renames


def rename_pvcs(
    volumes: Iterable[Mapping[str, Any]] | None,
    rename_map: Mapping[str, str] | None,
    path: str,
) -> list[Operation]:
    """Patch the claim name of every volume whose claim is in the rename map.

    ``path`` holds one ``{}`` placeholder for the volume's index.
    """
    if not rename_map:
        return []
    patch = []
    for index, volume in enumerate(volumes or ()):
        claim = volume.get("persistentVolumeClaim") if isinstance(volume, Mapping) else None
        if not isinstance(claim, Mapping):
            continue
        claim_name = claim.get("claimName") or ""
        if claim_name in rename_map:
            patch.append(Operation(op="replace", path=path.format(index), value=rename_map[claim_name]))
    return patch