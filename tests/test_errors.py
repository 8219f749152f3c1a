import pytest

from toxiproxy_client.errors import JsonDecodeError, ToxiproxyError


def test_json_decode_error_message_has_prefix():
    err = JsonDecodeError("missing field")
    assert str(err) == "json deserialize failed: missing field"


def test_json_decode_error_keeps_detail():
    cause = KeyError("name")
    err = JsonDecodeError(cause)
    assert err.detail is cause
    assert str(err).startswith("json deserialize failed: ")


def test_json_decode_error_is_caught_as_toxiproxy_error():
    err = JsonDecodeError("broken")
    assert str(err) == "json deserialize failed: broken"
    assert err.detail == "broken"
    with pytest.raises(ToxiproxyError) as info:
        raise err
    assert info.value is err
    assert str(info.value).endswith("broken")


def test_toxiproxy_error_message_preserved():
    err = ToxiproxyError("GET error: refused")
    assert str(err) == "GET error: refused"
    assert not isinstance(err, JsonDecodeError)