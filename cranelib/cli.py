"""Helpers for writing plugins that run as executables over stdin and stdout."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Iterable, Mapping
from typing import IO, Any, NoReturn

from cranelib.errors import PluginError, PluginErrorType
from cranelib.plugin import (
    OptionalFields,
    Plugin,
    PluginMetadata,
    PluginRequest,
    PluginResponse,
    Version,
)

RunFunc = Callable[[PluginRequest], PluginResponse]

_LOGGER = logging.getLogger("cranelib.plugin")


class CustomPlugin(Plugin):
    """A plugin built from a name, a version and a run function."""

    def __init__(self, plugin_metadata: PluginMetadata, run_func: RunFunc | None = None) -> None:
        self._metadata = plugin_metadata
        self._run_func = run_func

    def run(self, request: PluginRequest) -> PluginResponse:
        if self._run_func is None:
            return PluginResponse()
        return self._run_func(request)

    def metadata(self) -> PluginMetadata:
        return self._metadata


def new_custom_plugin(
    name: str,
    version: str,
    optional_fields: Iterable[OptionalFields] | None,
    run_func: RunFunc | None,
) -> CustomPlugin:
    """Build a plugin that speaks the v1 request and response protocol."""
    return CustomPlugin(
        PluginMetadata(
            name=name,
            version=version,
            request_version=[Version.V1.value],
            response_version=[Version.V1.value],
            optional_fields=list(optional_fields or []),
        ),
        run_func,
    )


def logger() -> logging.Logger:
    """Return the logger plugins use; it writes to standard error."""
    if not _LOGGER.handlers:
        _LOGGER.addHandler(logging.StreamHandler(sys.stderr))
    return _LOGGER


def write_error_and_exit(err: BaseException, stderr: IO[str] | None = None) -> NoReturn:
    """Write the error's text to standard error and exit with status 1."""
    stream = stderr if stderr is not None else sys.stderr
    stream.write(str(err))
    stream.flush()
    raise SystemExit(1)


def _read_object(stdin: IO[Any]) -> dict[str, Any]:
    data = stdin.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    decoded, _ = json.JSONDecoder().raw_decode(data.lstrip())
    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise ValueError(f"expected a JSON object, got {type(decoded).__name__}")
    return decoded


def _extras(raw: Any, stderr: IO[str]) -> dict[str, str] | None:
    if not isinstance(raw, Mapping):
        return None
    extras: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(value, str):
            write_error_and_exit(
                PluginError(
                    PluginErrorType.INVALID_IO,
                    "error getting extras value string",
                    f"value {value!r} for param {key} is not a string",
                ),
                stderr,
            )
        extras[key] = value
    return extras


def run_and_exit(
    plugin: Plugin,
    stdin: IO[Any] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> None:
    """Serve one plugin call: read a request, answer with metadata or a response.

    An empty object on stdin asks for the plugin's metadata. Any failure is
    written to stderr as a JSON error and the process exits with status 1.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    try:
        document = _read_object(stdin)
    except (OSError, ValueError) as exc:
        write_error_and_exit(
            PluginError(PluginErrorType.INVALID_IO, "error reading plugin input from input", str(exc)),
            stderr,
        )

    if not document:
        try:
            stdout.write(json.dumps(plugin.metadata().to_dict(), separators=(",", ":")) + "\n")
            stdout.flush()
        except (OSError, TypeError, ValueError) as exc:
            write_error_and_exit(
                PluginError(PluginErrorType.INVALID_IO, "error writing plugin response to stdOut", str(exc)),
                stderr,
            )
        return

    body = {key: value for key, value in document.items() if key != "extras"}
    try:
        request = PluginRequest.from_dict(body)
    except ValueError as exc:
        write_error_and_exit(
            PluginError(PluginErrorType.INVALID_INPUT, "error writing plugin response to stdOut", str(exc)),
            stderr,
        )

    extras = _extras(document.get("extras"), stderr)
    if extras is not None:
        request.extras = extras

    try:
        response = plugin.run(request)
    except Exception as exc:  # any plugin failure is reported, not propagated
        write_error_and_exit(
            PluginError(PluginErrorType.RUN, "error when running plugin", str(exc)),
            stderr,
        )

    try:
        encoded = json.dumps(response.to_dict(), separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        write_error_and_exit(
            PluginError(PluginErrorType.RUN, "invalid json plugin output, unable to marshal in", str(exc)),
            stderr,
        )

    try:
        stdout.write(encoded)
        stdout.flush()
    except OSError as exc:
        write_error_and_exit(
            PluginError(PluginErrorType.INVALID_IO, "error writing plugin response to stdOut", str(exc)),
            stderr,
        )