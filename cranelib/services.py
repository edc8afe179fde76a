"""Patches that drop cluster-assigned fields from Services."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from cranelib.jsonpatch import Operation

UPDATE_CLUSTER_IP = "/spec/clusterIP"
UPDATE_CLUSTER_IPS = "/spec/clusterIPs"
UPDATE_EXTERNAL_IPS = "/spec/externalIPs"
UPDATE_NODE_PORT = "/spec/ports/{}/nodePort"
LAST_APPLIED_ANNOTATION = "kubectl.kubernetes.io/last-applied-configuration"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _spec(obj: Mapping[str, Any]) -> Mapping[str, Any] | None:
    spec = obj.get("spec")
    return spec if isinstance(spec, Mapping) else None


def _annotations(obj: Mapping[str, Any]) -> dict[str, str]:
    metadata = obj.get("metadata")
    if not isinstance(metadata, Mapping):
        return {}
    annotations = metadata.get("annotations")
    if not isinstance(annotations, Mapping):
        return {}
    if not all(isinstance(value, str) for value in annotations.values()):
        return {}
    return dict(annotations)


def is_load_balancer_service(obj: Mapping[str, Any]) -> bool:
    spec = _spec(obj)
    return spec is not None and spec.get("type") == "LoadBalancer"


def should_remove_service_cluster_ip(obj: Mapping[str, Any]) -> bool:
    """A cluster IP is removed unless it is the headless ``None``."""
    spec = _spec(obj)
    if spec is None or "clusterIP" not in spec:
        return False
    return spec["clusterIP"] != "None"


def should_remove_service_cluster_ips(obj: Mapping[str, Any]) -> bool:
    """Cluster IPs are removed unless the first of them is ``None``."""
    spec = _spec(obj)
    if spec is None or "clusterIPs" not in spec:
        return False
    cluster_ips = spec["clusterIPs"]
    if not isinstance(cluster_ips, list) or not cluster_ips:
        return True
    return cluster_ips[0] != "None"


def get_node_port_int(node_port: Any) -> int:
    """Read a node port number.

    Strings are only validated: a well-formed one counts as 0, a malformed one
    raises ValueError. Values of other types count as 0.
    """
    if isinstance(node_port, bool):
        return 0
    if isinstance(node_port, int):
        return node_port
    if isinstance(node_port, float):
        return int(node_port)
    if isinstance(node_port, str):
        if not _INTEGER_RE.fullmatch(node_port):
            raise ValueError(f"invalid node port {node_port!r}")
        return 0
    return 0


def _applied_node_ports(obj: Mapping[str, Any]) -> tuple[set[str], set[int]]:
    """Node ports set explicitly in the last applied configuration."""
    explicit: set[str] = set()
    unnamed: set[int] = set()
    config = _annotations(obj).get(LAST_APPLIED_ANNOTATION)
    if config is None:
        return explicit, unnamed
    try:
        applied = json.loads(config)
    except ValueError as exc:
        raise ValueError(f"invalid last applied configuration: {exc}") from exc
    if applied is None:
        return explicit, unnamed
    if not isinstance(applied, dict):
        raise ValueError("last applied configuration must be a JSON object")
    if "spec" not in applied:
        return explicit, unnamed
    spec = applied["spec"]
    if not isinstance(spec, Mapping):
        raise ValueError(f".spec accessor error: {spec!r} is not a mapping")
    if "ports" not in spec:
        return explicit, unnamed
    ports = spec["ports"]
    if not isinstance(ports, list):
        raise ValueError(f".spec.ports accessor error: {ports!r} is not a list")
    for port in ports:
        if not isinstance(port, Mapping) or "nodePort" not in port:
            continue
        node_port = get_node_port_int(port["nodePort"])
        if node_port <= 0:
            continue
        if "name" not in port:
            unnamed.add(node_port)
            continue
        name = port["name"]
        if not isinstance(name, str):
            raise ValueError(f"port name {name!r} is not a string")
        explicit.add(name)
    return explicit, unnamed


def get_node_port_patch(obj: Mapping[str, Any]) -> list[Operation]:
    """Remove node ports that were not set explicitly by the user."""
    spec = _spec(obj)
    if spec is None or "type" not in spec or spec["type"] == "ExternalName":
        return []
    ports = spec.get("ports")
    if not isinstance(ports, list):
        return []

    explicit, unnamed = _applied_node_ports(obj)
    patch = []
    for index, port in enumerate(ports):
        if not isinstance(port, Mapping) or "nodePort" not in port:
            continue
        name = port.get("name")
        name = name if isinstance(name, str) else ""
        node_port = get_node_port_int(port["nodePort"])
        if node_port == 0:
            continue
        keep = name in explicit if name else node_port in unnamed
        if not keep:
            patch.append(Operation(op="remove", path=UPDATE_NODE_PORT.format(index)))
    return patch


def remove_service_fields(obj: Mapping[str, Any]) -> list[Operation]:
    """Remove external IPs, cluster IPs and implicit node ports of a Service."""
    patch = []
    if is_load_balancer_service(obj):
        patch.append(Operation(op="remove", path=UPDATE_EXTERNAL_IPS))
    if should_remove_service_cluster_ip(obj):
        patch.append(Operation(op="remove", path=UPDATE_CLUSTER_IP))
    if should_remove_service_cluster_ips(obj):
        patch.append(Operation(op="remove", path=UPDATE_CLUSTER_IPS))
    patch.extend(get_node_port_patch(obj))
    return patch