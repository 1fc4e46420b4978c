import os
import re
import time

import pytest

from xbtkit.btmisc import (
    b2a,
    backward_slashes,
    duration2a,
    escape_string,
    forward_slashes,
    generate_random_string,
    get_env,
    hex_decode,
    hex_encode,
    hex_encode_int,
    hms2i,
    is_private_ipa,
    js_encode,
    merkle_tree_size,
    mk_sname,
    n2a,
    native_slashes,
    peer_id2a,
    time2a,
    uri_decode,
    uri_encode,
    xbt_version2a,
)


def test_escape_string():
    assert escape_string("ab\0") == "ab\\0"
    assert escape_string("a b") == "a\\x20b"


def test_escape_string_keeps_printable():
    assert escape_string("Hello!") == "Hello!"


def test_generate_random_string():
    value = generate_random_string(16)
    assert len(value) == 16
    assert value.isalnum() and value.isascii()


def test_get_env(monkeypatch):
    monkeypatch.setenv("XBTKIT_TEST_VAR", "value")
    monkeypatch.delenv("XBTKIT_TEST_MISSING", raising=False)
    assert get_env("XBTKIT_TEST_VAR") == "value"
    assert get_env("XBTKIT_TEST_MISSING") == ""


def test_hex_encode():
    assert hex_encode(b"\x00\xff\x10") == "00ff10"


def test_hex_round_trip():
    data = bytes(range(256))
    assert hex_decode(hex_encode(data)) == data
    assert hex_decode(hex_encode(data).upper()) == data


def test_hex_decode_ignores_odd_tail():
    assert hex_decode("abc") == hex_decode("ab")


def test_hex_encode_int():
    assert hex_encode_int(2, 0x1AB) == "ab"
    assert hex_encode_int(4, 0x1AB) == "01ab"


def test_js_encode():
    assert js_encode("a'b\"c\\") == "a\\'b\\\"c\\\\"


@pytest.mark.parametrize("text", ["hello world", "a&b=c/d", "x-y_z.w,v@u", "caf\u00e9 %"])
def test_uri_round_trip(text):
    assert uri_decode(uri_encode(text)) == text.encode("utf-8")


def test_uri_encode_keeps_safe_characters():
    assert uri_encode("a-b,c.d@e_f") == "a-b,c.d@e_f"


def test_uri_encode_space_is_plus():
    assert uri_encode("a b") == "a+b"


def test_uri_decode_truncated_escape_is_empty():
    assert uri_decode("abc%2") == b""


def test_uri_decode_binary():
    assert uri_decode(uri_encode(b"\x00\xff")) == b"\x00\xff"


@pytest.mark.parametrize(
    "address,expected",
    [
        ("10.1.2.3", True),
        ("127.0.0.1", True),
        ("172.16.0.1", True),
        ("172.32.0.1", False),
        ("192.168.0.1", True),
        ("8.8.8.8", False),
    ],
)
def test_is_private_ipa(address, expected):
    assert is_private_ipa(address) is expected


def test_b2a_small_values():
    assert b2a(500) == "500"
    assert b2a(500, "B") == "500 B"
    assert b2a(-500) == "-500"


def test_b2a_scaled_suffix():
    assert b2a(2048) == "2 k"
    assert b2a(2048, "B").endswith(" kB")


def test_n2a_scaled():
    assert n2a(999) == "999"
    assert n2a(5_000_000).endswith(" m")
    assert n2a(1500).startswith("1.")


def test_peer_id_wrong_length():
    assert peer_id2a(b"short") == ""


def test_peer_id_azureus():
    assert peer_id2a(b"-AZ2504-" + b"a" * 12) == "Azureus 2504"


def test_peer_id_single_letter():
    assert peer_id2a(b"M4-0-2--" + b"x" * 12) == "Mainline 4"


def test_peer_id_xbt_fake():
    genuine = b"XBT054--" + b"abcdefghijkl"
    fake = b"XBT054--" + b"abcdefghijk\x01"
    assert peer_id2a(genuine) == "XBT Client 054"
    assert peer_id2a(fake) == "XBT Client 054 (fake)"


def test_peer_id_bitcomet_exbc():
    assert peer_id2a(b"exbc\x00\x2a" + b"z" * 14) == "BitComet 0.42"


def test_peer_id_unknown():
    assert peer_id2a(b"z" * 20) == "Unknown"


def test_duration2a():
    assert duration2a(30) == "30.0 seconds"
    assert duration2a(7200) == "2.0 hours"


def test_time2a():
    stamp = time.mktime((2020, 1, 2, 3, 4, 5, 0, 0, -1))
    assert time2a(stamp) == "2020-01-02 03:04:05"


def test_time2a_format():
    result = time2a(0)
    assert len(result) == 19
    assert re.fullmatch(r"\d{4}-\d\d-\d\d \d\d:\d\d:\d\d", result) is not None
    assert result == time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(0))


def test_merkle_tree_size():
    assert merkle_tree_size(0) == 0
    assert merkle_tree_size(1) == 1
    assert merkle_tree_size(4) > merkle_tree_size(3) > merkle_tree_size(2)


def test_slashes():
    assert forward_slashes("a\\b\\c") == "a/b/c"
    assert backward_slashes("a/b/c") == "a\\b\\c"
    expected = "a\\b" if os.sep == "\\" else "a/b"
    assert native_slashes("a/b") == expected


def test_hms2i_seconds_only():
    assert hms2i(0, 0, 42) == 42


def test_xbt_version2a():
    assert xbt_version2a(123) == "1.2.3"


def test_mk_sname():
    assert mk_sname("h3ll0-w0rld") == "heioworid"


def test_mk_sname_is_idempotent():
    once = mk_sname("aa--bb@@1100")
    assert mk_sname(once) == once