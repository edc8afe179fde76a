import pytest

from cranelib.duck_type import has_status_object, is_pod_specable

DEPLOYMENT = {
    "metadata": {"creationTimestamp": None},
    "spec": {
        "selector": None,
        "template": {
            "metadata": {"creationTimestamp": None},
            "spec": {
                "containers": [{"name": "", "image": "Hello World", "resources": {}}],
            },
        },
        "strategy": {},
    },
    "status": {},
}

POD_SPECABLE_CASES = [
    ("IsPodSpecable", {"spec": {"template": {"image": "testImage"}}}, True),
    ("IsNotPodSpecable", {"spec": {"template1": {"image": "testImage"}}}, False),
    ("IsNotPodSpecableNoSpec", {}, False),
    ("IsNotPodSpecableInvalidSpec", {"spec": "testing"}, False),
    ("IsNotPodSpecableInvalidTemplate", {"spec": {"template": "hello world"}}, False),
    ("IsNotPodSpecableInvalidObject", {"spec": {"template": {"spec": "testing"}}}, False),
    ("IsNotPodSpecableDeplyment", DEPLOYMENT, True),
]


@pytest.mark.parametrize(
    "obj,expected",
    [case[1:] for case in POD_SPECABLE_CASES],
    ids=[case[0] for case in POD_SPECABLE_CASES],
)
def test_is_pod_specable(obj, expected):
    assert (is_pod_specable(obj) is not None) is expected


def test_pod_specable_returns_template():
    template = is_pod_specable(DEPLOYMENT)
    assert template["spec"]["containers"][0]["image"] == "Hello World"


def test_bad_container_list_is_not_specable():
    obj = {"spec": {"template": {"spec": {"containers": "nope"}}}}
    assert is_pod_specable(obj) is None


HAS_STATUS_CASES = [
    ("HasStatus", {"status": {"testing": {"image": "testImage"}}}, True),
    ("NoStatus", {"spec": {"testing": {"image": "testImage"}}}, False),
    ("NoStatusMap", {"status": "bad Status Value"}, False),
]


@pytest.mark.parametrize(
    "obj,expected",
    [case[1:] for case in HAS_STATUS_CASES],
    ids=[case[0] for case in HAS_STATUS_CASES],
)
def test_has_status_object(obj, expected):
    assert has_status_object(obj) is expected