import pytest

from cranelib.errors import (
    PluginError,
    PluginErrorType,
    is_invalid_input_error,
    is_invalid_io_error,
    is_plugin_run_error,
)


def test_plugin_error_json():
    err = PluginError(
        PluginErrorType.RUN,
        "some message",
        "error occured due to Run function",
    )
    want = (
        '{"type":"PluginRunError","message":"some message",'
        '"error":"error occured due to Run function"}'
    )
    assert err.to_json() == want
    assert str(err) == want


def test_from_json_round_trip():
    err = PluginError(PluginErrorType.INVALID_IO, "reading", "broken pipe")
    decoded = PluginError.from_json(err.to_json())
    assert decoded == err
    assert decoded.type is PluginErrorType.INVALID_IO


def test_type_from_string():
    err = PluginError("PluginInvalidInputError")
    assert err.type is PluginErrorType.INVALID_INPUT


def test_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        PluginError.from_json("[]")


def test_raised_and_caught():
    with pytest.raises(PluginError) as info:
        raise PluginError(PluginErrorType.RUN, "run", "failed")
    assert is_plugin_run_error(info.value)


@pytest.mark.parametrize(
    "kind,expected",
    [
        (PluginErrorType.INVALID_INPUT, (True, False, False)),
        (PluginErrorType.RUN, (False, True, False)),
        (PluginErrorType.INVALID_IO, (False, False, True)),
    ],
)
def test_predicates(kind, expected):
    err = PluginError(kind)
    got = (is_invalid_input_error(err), is_plugin_run_error(err), is_invalid_io_error(err))
    assert got == expected


def test_predicates_reject_other_errors():
    err = ValueError("PluginRunError")
    assert not is_plugin_run_error(err)
    assert not is_invalid_input_error(None)