# cranelib

`cranelib` is a library for transforming Kubernetes resource manifests on
their way from one cluster to another. Each resource, a plain `dict` as
decoded from JSON or YAML, is handed to a set of plugins. A plugin looks at
the resource and answers in one of two ways:

* **whiteout**: the resource should be dropped, or
* **patches**: a list of JSON Patch (RFC 6902) operations to apply to it.

A `Runner` collects the answers from all plugins and merges them into a
single transform file. Duplicate operations are removed. When two plugins
write to the same path, plugin priorities decide which operation wins, and
the operations that lose are reported separately as ignored patches.

The package has no dependencies outside the standard library.

## Modules

* `cranelib.plugin`: the types every plugin works with.
  * `PluginRequest` holds the object and its string `extras`.
  * `PluginResponse` holds `version`, `is_white_out` and `patches`.
  * `PluginMetadata` and `OptionalFields` describe a plugin.
  * `Version` lists the protocol versions.
  * `Plugin` is the abstract base class, with `run(request)` and
    `metadata()`.
  * `parse_optional_field_slice_val` splits `a,b,c` flag values.
  * `parse_optional_field_map_val` parses `k1=v1,k2` flag values; a bare
    key maps to `""`.
  * Every type converts to and from its JSON form with `to_dict` and
    `from_dict`.
* `cranelib.runner`:
  * `Runner` runs plugins against one object.
  * `PluginOperation` records which plugin produced each operation.
  * `plugin_operations_from_patch`, `equal_plugin_operation` and
    `equal_plugin_operation_list` build and compare such records.
* `cranelib.jsonpatch`: a small JSON Patch model.
  * `Operation`, with `to_dict` and `from_dict`.
  * `decode_patch` and `encode_patch` read and write patch documents.
  * `equal_operation` compares two operations.
  * `equal` compares two patches and ignores the order of their
    operations.
  * `PatchError` is raised for malformed patch documents.
* `cranelib.errors`: `PluginError`, the structured error that plugin
  executables write to stderr.
  * Its string form is its compact JSON encoding, with the members `type`,
    `message` and `error`. `from_json` reads that encoding back.
  * `PluginErrorType` lists the kinds of error.
  * `is_invalid_input_error`, `is_plugin_run_error` and
    `is_invalid_io_error` test an exception for one kind.
* `cranelib.cli`: tools for writing a plugin executable in Python.
  * `new_custom_plugin` builds a `CustomPlugin` from a name, a version,
    optional fields and a run function.
  * `run_and_exit` serves one call over stdin and stdout.
  * `write_error_and_exit` writes an error to stderr and exits with
    status 1.
  * `logger` returns a logger that writes to stderr.
* `cranelib.patches`: patch builders for common edits.
  * `strip_fields` removes the server-populated fields, if present:
    `metadata.uid`, `selfLink`, `resourceVersion`, `creationTimestamp`,
    `generation`, `managedFields`, and `status`.
  * `add_annotations` and `remove_annotations` edit annotations.
  * `remove_pod_fields` removes a pod's `nodeName`, `nodeSelector` and
    `priority`.
  * `rename_pvc_templates` renames StatefulSet volume claim templates.
* `cranelib.services`: patches for Services.
  * `remove_service_fields` combines all of the patches below.
  * External IPs are removed from `LoadBalancer` services.
  * Cluster IPs are removed unless they are `None`.
  * Node ports are removed unless the
    `kubectl.kubernetes.io/last-applied-configuration` annotation set them
    explicitly.
  * The individual checks are also available:
    * `is_load_balancer_service`
    * `should_remove_service_cluster_ip`
    * `should_remove_service_cluster_ips`
    * `get_node_port_patch`
    * `get_node_port_int`
* `cranelib.pvc`: persistent volume claim renames.
  * `process_pvc_map` parses `old:new,...` and checks both names with
    `is_dns1123_subdomain`. It raises `ValueError` for an invalid pair.
  * `rename_pvcs` patches the `claimName` of matching volumes.
  * The path templates for the different resource kinds are
    `PVC_PATH_POD`, `PVC_PATH_GENERIC`, `PVC_PATH_CRON_JOB` and
    `PVC_PATH_TEMPLATE`.
* `cranelib.registry`: image registry replacement.
  * `update_image_registry` replaces the longest matching registry prefix
    of an image, or returns `None` when no prefix matches.
  * `update_image` builds the `replace` patch for one image path.
* `cranelib.duck_type`: structural checks.
  * `is_pod_specable` returns the pod template under `spec.template`, or
    `None` when there is none.
  * `has_status_object` tells whether the object has a `status` mapping.

## Writing a plugin executable

```python
import sys

from cranelib.cli import new_custom_plugin, run_and_exit
from cranelib.plugin import PluginResponse


def run(request):
    return PluginResponse(version="v1", is_white_out=request.object.get("kind") == "Pod")


plugin = new_custom_plugin("WhiteoutPodsPlugin", "v1", [], run)
run_and_exit(plugin, sys.stdin, sys.stdout, sys.stderr)
```

`run_and_exit` reads one JSON object from stdin:

* An empty object (`{}`) is a metadata request. The plugin's
  `PluginMetadata` is written to stdout.
* Any other object is a resource to transform. It must have a `kind`. Its
  optional `extras` member carries the plugin-specific flags, and every
  flag must be a string. The plugin's `PluginResponse` is written to stdout
  as JSON.

Reading or decoding the input can fail, the extras can be invalid, or the
plugin can raise. In each of these cases nothing is written to stdout.
Instead a `PluginError` is written to stderr as JSON and `SystemExit(1)` is
raised.

## Running plugins

```python
import logging

from cranelib.cli import new_custom_plugin
from cranelib.patches import add_annotations, strip_fields
from cranelib.plugin import PluginResponse
from cranelib.runner import Runner


def strip(request):
    return PluginResponse(version="v1", patches=strip_fields(request.object))


def annotate(request):
    value = request.extras.get("team", "none")
    return PluginResponse(version="v1", patches=add_annotations({"team": value}))


plugins = [
    new_custom_plugin("strip", "v1", [], strip),
    new_custom_plugin("annotate", "v1", [], annotate),
]

deployment = {
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {"name": "web", "uid": "00000000-0000-0000-0000-000000000000"},
}

runner = Runner(
    plugin_priorities={"annotate": 0},
    optional_flags={"team": "web"},
    log=logging.getLogger("transform"),
)
response = runner.run(deployment, plugins)
```

Each plugin gets its own deep copy of the object, so no plugin can change
what another one sees. The `RunnerResponse` carries the following:

* `have_white_out`: whether any plugin asked for a whiteout. When one did,
  no patches are returned.
* `transform_file`: the merged patch, as a JSON array of operations.
* `ignored_patches`: the operations that lost a collision on the same path,
  as a JSON array of `{"PluginName": ..., "Operation": ...}` objects.

Collisions are resolved as follows:

* A plugin listed in `plugin_priorities` beats one that is not listed.
* Between two listed plugins, the lower number wins.
* Otherwise the operation seen first is kept.

If any plugin raises, all plugins still run, and then the first exception
is raised again.

## What the package does not do

* It does not ship a ready-made transform plugin for Kubernetes resources.
  The building blocks are here: the modules `patches`, `services`, `pvc`,
  `registry` and `duck_type`. Deciding which resources to white out, and
  combining these patches into one plugin, is left to the caller.
* It does not start external plugin executables. `cranelib.cli` covers the
  side of the exchange that runs inside the executable; running such
  executables from a host program is not included.
* It provides no command-line program of its own.