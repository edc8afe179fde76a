import pytest

from cranelib.jsonpatch import (
    Operation,
    PatchError,
    decode_patch,
    encode_patch,
    equal,
    equal_operation,
)

COMPARE_CASES = [
    (
        "EqualPatches",
        '[{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        '[{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        True,
    ),
    (
        "EqualPatchesArrayValue",
        '[{"op": "add", "path": "/spec/testing", "value": ["value1", "value2"]}]',
        '[{"op": "add", "path": "/spec/testing", "value": ["value1", "value2"]}]',
        True,
    ),
    (
        "DifferentKinds",
        '[{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        '[{"op": "remove", "path": "/spec/testing"}]',
        False,
    ),
    (
        "DifferentPaths",
        '[{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        '[{"op": "add", "path": "/spec/testingNotSame", "value": "value1"}]',
        False,
    ),
    (
        "DifferentValues",
        '[{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        '[{"op": "add", "path": "/spec/testing", "value": "valueNotSame"}]',
        False,
    ),
    (
        "DifferentArrayValues",
        '[{"op": "add", "path": "/spec/testing", "value": ["value1", "value2"]}]',
        '[{"op": "add", "path": "/spec/testing", "value": ["value1", "value3"]}]',
        False,
    ),
    (
        "EqualPatchesDifferentOrders",
        '[{"op": "add", "path": "/spec/testingDiff", "value": "valueDiff"},'
        '{"op": "add", "path": "/spec/testing", "value": "value1"}]',
        '[{"op": "add", "path": "/spec/testing", "value": "value1"},'
        '{"op": "add", "path": "/spec/testingDiff", "value": "valueDiff"}]',
        True,
    ),
    (
        "SameMoveFrom",
        '[{"op": "move", "from": "/spec/from1", "path": "/spec/testing"}]',
        '[{"op": "move", "from": "/spec/from1", "path": "/spec/testing"}]',
        True,
    ),
    (
        "DifferentMoveFrom",
        '[{"op": "move", "from": "/spec/from1", "path": "/spec/testing"}]',
        '[{"op": "move", "from": "/spec/from2", "path": "/spec/testing"}]',
        False,
    ),
]


@pytest.mark.parametrize(
    "patch1,patch2,expected",
    [case[1:] for case in COMPARE_CASES],
    ids=[case[0] for case in COMPARE_CASES],
)
def test_compare(patch1, patch2, expected):
    assert equal(decode_patch(patch1), decode_patch(patch2)) is expected


def test_decode_invalid_json():
    with pytest.raises(PatchError):
        decode_patch('[{"op": "add", "path": v1"}]')


def test_decode_requires_array():
    with pytest.raises(PatchError):
        decode_patch('{"op": "add", "path": "/a", "value": 1}')


def test_decode_requires_op():
    with pytest.raises(PatchError):
        decode_patch('[{"path": "/a", "value": 1}]')


def test_decode_requires_path():
    with pytest.raises(PatchError):
        decode_patch('[{"op": "remove"}]')


def test_round_trip():
    patch = decode_patch(
        '[{"op": "add", "path": "/spec/testing", "value": {"a": [1, 2]}},'
        '{"op": "remove", "path": "/status"},'
        '{"op": "copy", "from": "/spec/a", "path": "/spec/b"}]'
    )
    again = decode_patch(encode_patch(patch))
    assert again == patch
    assert equal(again, patch)


def test_remove_has_no_value():
    (operation,) = decode_patch('[{"op": "remove", "path": "/spec/testing"}]')
    assert not operation.has_value
    assert operation.to_dict() == {"op": "remove", "path": "/spec/testing"}


def test_missing_values_compare_equal():
    a = Operation(op="remove", path="/x")
    b = Operation(op="remove", path="/x")
    assert equal_operation(a, b) is True


def test_bool_and_number_differ():
    a = Operation(op="add", path="/x", value=True)
    b = Operation(op="add", path="/x", value=1)
    assert equal_operation(a, b) is False


def test_int_and_float_are_same_number():
    a = Operation(op="add", path="/x", value=1)
    b = Operation(op="add", path="/x", value=1.0)
    assert equal_operation(a, b) is True


def test_move_without_from_is_not_equal():
    a = Operation(op="move", path="/x")
    b = Operation(op="move", path="/x")
    assert equal_operation(a, b) is False


def test_duplicate_operations_change_count():
    op = Operation(op="add", path="/x", value="v")
    assert equal([op], [op, op]) is False