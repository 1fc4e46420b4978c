# xbtkit

A small library of building blocks for BitTorrent trackers and clients,
written in plain Python with no dependencies outside the standard library.

## Installation

```
pip install .
```

## What is inside

- `xbtkit.bvalue`: bencoding. `decode(data)` parses the first bencoded
  value in `data` into `int`, `bytes`, `list` and `dict` (with `bytes`
  keys); `encode(value)` goes the other way and also accepts `str` and
  tuples; `encoded_size(value)` gives the encoded length without building
  the output. Malformed input raises `BencodeError`.
- `xbtkit.sha1`: SHA-1. `sha1(data)` returns a 20-byte digest; `Sha1`
  offers `update`, `digest` and `hexdigest`. Calling `update` with data
  after a digest has been taken raises `Sha1StateError`.
- `xbtkit.tracker`: `TrackerUrl.parse(url)` splits `http://` and `udp://`
  URLs into `protocol` (a `Protocol`), `host`, `port` (default 80 or 2710)
  and `path`; `valid()` checks the result. `TrackerAccount` holds
  `tracker`, `user` and `password`; `TrackerAccounts` is a list of them
  with `find(tracker)`, `dump()` and `TrackerAccounts.load(data)`.
- `xbtkit.xif`: XIF key/value containers. `XifKey` builds a tree of
  numbered keys and typed values (`set_value_int`, `set_value_string`,
  `set_value_float`, `set_value_binary`, `set_value_int64`, ...), writes it
  with `vdata()` and reads any file version with `XifKey.load_key(data)`.
  `XifKeyReader.from_bytes(data)` reads the compressed version while
  keeping entries in file order. Values are `XifValue` objects typed by
  `ValueType`; malformed data raises `XifError`.
- `xbtkit.gz`: `gzip(data)` and `gunzip(data)` for single gzip members
  with a plain 10-byte header. `gunzip` raises `ValueError` on short or
  corrupt input.
- `xbtkit.textformat`: `encode_field` and `encode_text` escape user text
  for HTML and turn `http://`, `https://`, `ftp://` and `mailto:` URLs
  into links; `trim_field` and `trim_text` tidy whitespace; `bbformat`
  renders BBCode (`[b]`, `[u]`, `[s]`, `[center]`, `[color=...]`,
  `[quote]`, `[url=...]` and others) as HTML.
- `xbtkit.btmisc`: assorted helpers: `b2a` and `n2a` for human-readable
  sizes, `peer_id2a` to name the client behind a peer id, `uri_encode`,
  `uri_decode`, `hex_encode`, `hex_decode`, `js_encode`, `escape_string`,
  `is_private_ipa`, `duration2a`, `time2a`, `merkle_tree_size`,
  `mk_sname`, `xbt_syslog` and more.
- `xbtkit.config`: `ConfigBase`, typed `name = value` settings with
  defaults. `set`, `load`, `load_file` and `save`; `save` comments out
  settings that are still at their default.
- `xbtkit.alerts`: `Alert` records with an `AlertLevel`, and `Alerts`, a
  history that keeps the latest 250.
- `xbtkit.stream`: big- and little-endian integer and float helpers,
  lenient `to_int` and `to_float` parsers, `file_get` and `file_put`, and
  `StreamReader` and `StreamWriter` for length-prefixed binary records.
- `xbtkit.profiler`: `Profiler(limit, text)`, a context manager that
  sends `"<ms> ms: <text>"` to the system log when a block takes `limit`
  milliseconds or more.

## Examples

```python
from xbtkit.bvalue import decode, encode

meta = decode(b"d8:announce20:http://example.com/ae")
assert meta == {b"announce": b"http://example.com/a"}
assert encode(meta) == b"d8:announce20:http://example.com/ae"
```

```python
from xbtkit.tracker import TrackerUrl

url = TrackerUrl.parse("udp://tracker.example.com:6969/announce")
print(url.host, url.port, url.valid())   # tracker.example.com 6969 True
```

```python
from xbtkit.btmisc import b2a, peer_id2a

print(b2a(1536, "b"))                       # "1.5 kb"
print(peer_id2a(b"-AZ2504-abcdefghijkl"))   # "Azureus 2504"
```

```python
from xbtkit.textformat import bbformat

print(bbformat("[b]bold[/b] and [u]underlined[/u]"))
# <b>bold</b> and <u>underlined</u>
```

```python
from xbtkit.xif import XifKey, XifKeyReader

key = XifKey()
key.set_value_int(1, 42)
key.set_value_string(2, "hello")
data = key.vdata()
assert XifKey.load_key(data) == key
assert XifKeyReader.from_bytes(data).get_value_int(1) == 42
```

## What it does not do

This is a library of helpers only. It has no command-line program, opens
no network connections, and has no database access: there is no tracker
server, no socket layer and no storage of peers or torrents here.

## Running the tests

```
pip install .[test]
pytest
```