import pytest

from xbtkit.bvalue import BencodeError, decode, encode, encoded_size


def test_decode_integer():
    assert decode(b"i42e") == 42


def test_decode_negative_integer():
    assert decode(b"i-17e") == -17


def test_decode_string():
    assert decode(b"4:spam") == b"spam"


def test_decode_empty_string():
    assert decode(b"0:") == b""


def test_decode_list():
    assert decode(b"l4:spami42ee") == [b"spam", 42]


def test_decode_dictionary_sorted():
    value = decode(b"d1:bi2e1:ai1ee")
    assert value == {b"a": 1, b"b": 2}
    assert list(value) == [b"a", b"b"]


def test_decode_nested():
    assert decode(b"d4:infod6:lengthi5eee") == {b"info": {b"length": 5}}


def test_decode_ignores_trailing_data():
    assert decode(b"i1eXYZ") == 1


def test_decode_integer_stops_at_non_digit():
    assert decode(b"i12abce") == 12


def test_decode_accepts_str():
    assert decode("3:abc") == b"abc"


@pytest.mark.parametrize(
    "data",
    [b"", b"x", b"i42", b"5:abc", b"3abc", b"di1ei2ee", b"l", b"d", b"l4:spam", b"d1:a"],
)
def test_decode_errors(data):
    with pytest.raises(BencodeError):
        decode(data)


def test_encode_dictionary_sorts_keys():
    assert encode({"b": 1, "a": b"x"}) == b"d1:a1:x1:bi1ee"


def test_encode_integer():
    assert encode(-3) == b"i-3e"


def test_encode_unsupported_type():
    with pytest.raises(TypeError):
        encode(1.5)


def test_encode_bad_key():
    with pytest.raises(TypeError):
        encode({1: 2})


@pytest.mark.parametrize(
    "value",
    [
        0,
        123456789012,
        b"",
        b"hello",
        [],
        {},
        [1, [2, [3, b"x"]]],
        {b"announce": b"http://tracker.example.com/", b"info": {b"piece length": 16384}},
    ],
)
def test_round_trip(value):
    assert decode(encode(value)) == value


@pytest.mark.parametrize(
    "value",
    [0, -5, b"abc", "héllo", [1, b"ab", {}], {"key": [1, 2], b"z": {"q": b""}}],
)
def test_encoded_size_matches_encode(value):
    assert encoded_size(value) == len(encode(value))


def test_encode_str_as_utf8():
    assert decode(encode("héllo")) == "héllo".encode("utf-8")