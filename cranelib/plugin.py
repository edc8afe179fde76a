"""Plugin protocol: requests, responses, metadata and flag parsing."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cranelib.jsonpatch import Operation

VERSION = "v0.0.8"

METADATA_STRING = "METADATA"
"""Marker used by plugin helpers to announce a metadata exchange."""


class Version(str, Enum):
    V1 = "v1"


REQUEST_VERSION = Version.V1
RESPONSE_VERSION = Version.V1


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {data!r}")
    return data


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field {key!r} must be a list of strings, got {value!r}")
    return list(value)


@dataclass
class OptionalFields:
    """A flag a plugin accepts through the request extras."""

    flag_name: str
    help: str = ""
    example: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"flagName": self.flag_name, "help": self.help, "example": self.example}


def _optional_fields(data: Any) -> OptionalFields:
    data = _require_mapping(data, "optional field")
    return OptionalFields(
        flag_name=_str_field(data, "flagName"),
        help=_str_field(data, "help"),
        example=_str_field(data, "example"),
    )


@dataclass
class PluginMetadata:
    """What a plugin says about itself."""

    name: str
    version: str
    request_version: list[str] = field(default_factory=list)
    response_version: list[str] = field(default_factory=list)
    optional_fields: list[OptionalFields] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "requestVersion": [_text(v) for v in self.request_version],
            "responseVersion": [_text(v) for v in self.response_version],
        }
        if self.optional_fields:
            data["optionalFields"] = [f.to_dict() for f in self.optional_fields]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PluginMetadata:
        data = _require_mapping(data, "plugin metadata")
        raw_fields = data.get("optionalFields") or []
        if not isinstance(raw_fields, list):
            raise ValueError("field 'optionalFields' must be a list")
        return cls(
            name=_str_field(data, "name"),
            version=_str_field(data, "version"),
            request_version=_str_list(data, "requestVersion"),
            response_version=_str_list(data, "responseVersion"),
            optional_fields=[_optional_fields(item) for item in raw_fields],
        )


@dataclass
class PluginRequest:
    """A Kubernetes object handed to a plugin, with the caller's extra flags."""

    object: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = copy.deepcopy(self.object)
        data["extras"] = dict(self.extras)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PluginRequest:
        data = _require_mapping(data, "plugin request")
        kind = data.get("kind")
        if not isinstance(kind, str) or not kind:
            raise ValueError(f"object 'kind' is missing in {dict(data)!r}")
        raw_extras = data.get("extras")
        extras: dict[str, str] = {}
        if raw_extras is not None:
            raw_extras = _require_mapping(raw_extras, "extras")
            for key, value in raw_extras.items():
                if not isinstance(value, str):
                    raise ValueError(f"value {value!r} for param {key} is not a string")
                extras[key] = value
        obj = {key: copy.deepcopy(value) for key, value in data.items() if key != "extras"}
        return cls(object=obj, extras=extras)


@dataclass
class PluginResponse:
    """A plugin's verdict on one object."""

    version: str = ""
    is_white_out: bool = False
    patches: list[Operation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.version:
            data["version"] = _text(self.version)
        if self.is_white_out:
            data["isWhiteOut"] = True
        if self.patches:
            data["patches"] = [op.to_dict() for op in self.patches]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PluginResponse:
        data = _require_mapping(data, "plugin response")
        white_out = data.get("isWhiteOut")
        if white_out is None:
            white_out = False
        if not isinstance(white_out, bool):
            raise ValueError(f"field 'isWhiteOut' must be a boolean, got {white_out!r}")
        raw_patches = data.get("patches")
        if raw_patches is None:
            raw_patches = []
        if not isinstance(raw_patches, list):
            raise ValueError("field 'patches' must be a list")
        return cls(
            version=_str_field(data, "version"),
            is_white_out=white_out,
            patches=[Operation.from_dict(item) for item in raw_patches],
        )


class Plugin(ABC):
    """A transformation plugin."""

    @abstractmethod
    def run(self, request: PluginRequest) -> PluginResponse:
        """Decide what to do with the object in the request."""

    @abstractmethod
    def metadata(self) -> PluginMetadata:
        """Describe the plugin."""


def parse_optional_field_slice_val(value: str) -> list[str]:
    """Split a comma-separated flag value."""
    return value.split(",")


def parse_optional_field_map_val(value: str) -> dict[str, str]:
    """Parse ``key=value`` pairs separated by commas; a bare key maps to ``""``."""
    result: dict[str, str] = {}
    for pair in value.split(","):
        parts = pair.split("=")
        result[parts[0]] = parts[1] if len(parts) > 1 else ""
    return result