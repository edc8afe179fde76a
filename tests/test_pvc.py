import pytest

from cranelib.jsonpatch import Operation
from cranelib.pvc import (
    PVC_PATH_GENERIC,
    PVC_PATH_POD,
    is_dns1123_subdomain,
    process_pvc_map,
    rename_pvcs,
)


@pytest.mark.parametrize("name", ["old-pvc1-name", "data.example.com", "a"])
def test_valid_subdomains(name):
    assert is_dns1123_subdomain(name) == []


@pytest.mark.parametrize("name", ["Bad_Name", "-leading", "trailing-", ""])
def test_invalid_subdomains(name):
    assert len(is_dns1123_subdomain(name)) == 1


def test_too_long_subdomain():
    errors = is_dns1123_subdomain("a" * 254)
    assert errors == ["must be no more than 253 characters"]


def test_process_pvc_map():
    got = process_pvc_map("old-pvc1-name:new-pvc1-name,old-pvc2-name:new-pvc2-name")
    assert got == {"old-pvc1-name": "new-pvc1-name", "old-pvc2-name": "new-pvc2-name"}


@pytest.mark.parametrize("value", ["Old:new", "old:New_Name", "old"])
def test_process_pvc_map_rejects(value):
    with pytest.raises(ValueError, match="Invalid PVC remap"):
        process_pvc_map(value)


VOLUMES = [
    {"name": "data", "persistentVolumeClaim": {"claimName": "old"}},
    {"name": "cfg", "configMap": {"name": "old"}},
    {"name": "other", "persistentVolumeClaim": {"claimName": "keep"}},
    {"name": "again", "persistentVolumeClaim": {"claimName": "old"}},
]


def test_rename_pvcs():
    got = rename_pvcs(VOLUMES, {"old": "new"}, PVC_PATH_POD)
    assert got == [
        Operation(op="replace", path=PVC_PATH_POD.format(0), value="new"),
        Operation(op="replace", path=PVC_PATH_POD.format(3), value="new"),
    ]
    assert got[0].to_dict() == {
        "op": "replace",
        "path": "/spec/volumes/0/persistentVolumeClaim/claimName",
        "value": "new",
    }


def test_rename_pvcs_generic_path():
    got = rename_pvcs(VOLUMES[:1], {"old": "new"}, PVC_PATH_GENERIC)
    assert [op.path for op in got] == [PVC_PATH_GENERIC.format(0)]


@pytest.mark.parametrize("volumes,rename_map", [(VOLUMES, {}), (VOLUMES, None), ([], {"old": "new"}), (None, {"old": "new"})])
def test_rename_pvcs_nothing_to_do(volumes, rename_map):
    assert rename_pvcs(volumes, rename_map, PVC_PATH_POD) == []