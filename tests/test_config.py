import io

import pytest

from xbtkit.config import ConfigBase


def _config():
    return ConfigBase({"port": 2710, "debug": False, "name": "xbt"})


def test_defaults():
    config = _config()
    assert config["port"] == 2710
    assert config["debug"] is False
    assert config["name"] == "xbt"


def test_set_text_converts_to_int():
    config = _config()
    config.set("port", "80")
    assert config["port"] == 80


def test_set_text_converts_to_bool():
    config = _config()
    config.set("debug", "1")
    assert config["debug"] is True
    config.set("debug", "0")
    assert config["debug"] is False


def test_set_string():
    config = _config()
    config.set("name", "tracker")
    assert config["name"] == "tracker"


def test_unknown_setting_raises():
    with pytest.raises(KeyError):
        _config().set("missing", "1")


def test_wrong_type_raises():
    with pytest.raises(KeyError):
        _config().set("name", 5)


def test_load_ignores_junk():
    config = _config()
    config.load(["port = 6969", "garbage line", "unknown = 3", "  name =  box  "])
    assert config["port"] == 6969
    assert config["name"] == "box"


def test_load_from_text():
    config = _config()
    config.load("debug = 1\nport=81\n")
    assert config["debug"] is True
    assert config["port"] == 81


def test_save_output():
    config = _config()
    config.set("port", "80")
    out = io.StringIO()
    config.save(out)
    assert out.getvalue().splitlines() == ["# debug = 0", "port = 80", "# name = xbt"]


def test_save_load_round_trip():
    config = _config()
    config.set("port", 1234)
    config.set("debug", True)
    config.set("name", "node")
    out = io.StringIO()
    config.save(out)
    fresh = _config()
    fresh.load(out.getvalue())
    assert [fresh[k] for k in ("port", "debug", "name")] == [1234, True, "node"]


def test_load_file(tmp_path):
    path = tmp_path / "xbt.conf"
    path.write_text("port = 9000\n", encoding="utf-8")
    config = _config()
    config.load_file(path)
    assert config["port"] == 9000


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        _config().load_file(tmp_path / "absent.conf")