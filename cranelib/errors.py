"""Errors reported by plugins over their standard error stream."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class PluginErrorType(str, Enum):
    INVALID_INPUT = "PluginInvalidInputError"
    RUN = "PluginRunError"
    INVALID_IO = "PluginInvalidIOError"


class PluginError(Exception):
    """A plugin failure whose text is its JSON encoding."""

    def __init__(
        self,
        type: PluginErrorType | str,
        message: str = "",
        error_message: str = "",
    ) -> None:
        try:
            type = PluginErrorType(type)
        except ValueError:
            pass
        super().__init__(type, message, error_message)
        self.type = type
        self.message = message
        self.error_message = error_message

    def __str__(self) -> str:
        return self.to_json()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluginError):
            return NotImplemented
        return (self.type, self.message, self.error_message) == (
            other.type,
            other.message,
            other.error_message,
        )

    __hash__ = Exception.__hash__

    def to_json(self) -> str:
        """Encode the error as a compact JSON object."""
        kind = self.type.value if isinstance(self.type, PluginErrorType) else self.type
        return json.dumps(
            {"type": kind, "message": self.message, "error": self.error_message},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, data: str | bytes) -> PluginError:
        """Decode an error written by :meth:`to_json`."""
        decoded: Any = json.loads(data)
        if not isinstance(decoded, dict):
            raise ValueError("a plugin error must be a JSON object")
        fields = {key: decoded.get(key) or "" for key in ("type", "message", "error")}
        for key, value in fields.items():
            if not isinstance(value, str):
                raise ValueError(f"plugin error field {key!r} must be a string")
        return cls(fields["type"], fields["message"], fields["error"])


def _has_type(err: BaseException | None, kind: PluginErrorType) -> bool:
    return isinstance(err, PluginError) and err.type == kind


def is_invalid_input_error(err: BaseException | None) -> bool:
    return _has_type(err, PluginErrorType.INVALID_INPUT)


def is_plugin_run_error(err: BaseException | None) -> bool:
    return _has_type(err, PluginErrorType.RUN)


def is_invalid_io_error(err: BaseException | None) -> bool:
    return _has_type(err, PluginErrorType.INVALID_IO)