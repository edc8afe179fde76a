"""Run a set of plugins over one object and merge their patches."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from cranelib.jsonpatch import Operation, encode_patch, equal_operation
from cranelib.plugin import Plugin, PluginRequest


@dataclass(frozen=True)
class PluginOperation:
    """A patch operation together with the plugin that produced it."""

    plugin_name: str
    operation: Operation

    def to_dict(self) -> dict[str, Any]:
        return {"PluginName": self.plugin_name, "Operation": self.operation.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PluginOperation:
        if not isinstance(data, Mapping):
            raise ValueError(f"plugin operation must be a JSON object, got {data!r}")
        name = data.get("PluginName") or ""
        if not isinstance(name, str):
            raise ValueError(f"field 'PluginName' must be a string, got {name!r}")
        return cls(plugin_name=name, operation=Operation.from_dict(data.get("Operation")))


@dataclass
class RunnerResponse:
    """The merged outcome of running every plugin.

    ``transform_file`` is an encoded JSON Patch; ``ignored_patches`` is an
    encoded list of :class:`PluginOperation` that lost a collision.
    """

    transform_file: str = "[]"
    have_white_out: bool = False
    ignored_patches: str = "[]"


def plugin_operations_from_patch(plugin_name: str, patch: Iterable[Operation]) -> list[PluginOperation]:
    """Tag every operation of a patch with the plugin's name."""
    return [PluginOperation(plugin_name=plugin_name, operation=op) for op in patch]


def equal_plugin_operation(op1: PluginOperation, op2: PluginOperation) -> bool:
    return op1.plugin_name == op2.plugin_name and equal_operation(op1.operation, op2.operation)


def equal_plugin_operation_list(ops1: Sequence[PluginOperation], ops2: Sequence[PluginOperation]) -> bool:
    """Tell whether two lists hold equal operations in the same order."""
    return len(ops1) == len(ops2) and all(map(equal_plugin_operation, ops1, ops2))


def _value_of(operation: Operation) -> Any:
    return operation.value if operation.has_value else None


@dataclass
class Runner:
    """Runs plugins against an object; lower priority numbers win collisions."""

    plugin_priorities: dict[str, int] | None = None
    optional_flags: dict[str, str] | None = None
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def run(self, obj: Mapping[str, Any], plugins: Iterable[Plugin]) -> RunnerResponse:
        """Run every plugin on a private copy of ``obj``.

        The first plugin failure is raised after all plugins have run.
        """
        have_white_out = False
        operations: list[PluginOperation] = []
        errors: list[Exception] = []

        for plugin in plugins:
            request = PluginRequest(object=copy.deepcopy(dict(obj)), extras=dict(self.optional_flags or {}))
            try:
                response = plugin.run(request)
            except Exception as exc:  # a failing plugin must not stop the others
                errors.append(exc)
                continue
            if response.is_white_out:
                have_white_out = True
            if response.patches:
                operations.extend(plugin_operations_from_patch(plugin.metadata().name, response.patches))

        response = RunnerResponse(have_white_out=have_white_out)
        if errors:
            raise errors[0]
        if have_white_out or not operations:
            return response

        patch, ignored = self._sanitize_patches(operations)
        response.transform_file = encode_patch(patch)
        response.ignored_patches = json.dumps([op.to_dict() for op in ignored], separators=(",", ":"))
        return response

    def _sanitize_patches(
        self, operations: Iterable[PluginOperation]
    ) -> tuple[list[Operation], list[PluginOperation]]:
        """Drop duplicate operations and resolve operations on the same path."""
        priorities = self.plugin_priorities or {}
        by_path: dict[str, PluginOperation] = {}
        ignored: list[PluginOperation] = []
        for current in operations:
            key = current.operation.path
            previous = by_path.get(key)
            if previous is None:
                by_path[key] = current
                continue
            current_prio = priorities.get(current.plugin_name)
            previous_prio = priorities.get(previous.plugin_name)
            replace = current_prio is not None and (previous_prio is None or current_prio < previous_prio)
            if replace:
                by_path[key] = current
            if equal_operation(previous.operation, current.operation):
                continue
            selected, rejected = (current, previous) if replace else (previous, current)
            ignored.append(rejected)
            self.log.debug(
                "Operation on same path: %s with different kind or values selected kind, value: %s, %r "
                "(from plugin %s) kind, value that will be ignored: %s, %r (from plugin %s)",
                key,
                selected.operation.kind,
                _value_of(selected.operation),
                selected.plugin_name,
                rejected.operation.kind,
                _value_of(rejected.operation),
                rejected.plugin_name,
            )
        return [op.operation for op in by_path.values()], ignored