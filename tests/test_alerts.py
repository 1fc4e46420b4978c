import time

from xbtkit.alerts import Alert, AlertLevel, Alerts
from xbtkit.stream import StreamReader


def test_levels_ordered_by_severity():
    assert AlertLevel.EMERG < AlertLevel.WARN < AlertLevel.DEBUG
    reader = StreamReader(Alert(AlertLevel.DEBUG, "trace", time=0).dump())
    assert reader.read_int(4) == 0
    assert reader.read_int(4) == 7


def test_default_time_is_now():
    alert = Alert(AlertLevel.INFO, "started")
    assert abs(alert.time - time.time()) < 5
    assert alert.source == ""


def test_dump_layout_round_trips_through_reader():
    alert = Alert(AlertLevel.WARN, "disk low", source="storage", time=1234)
    reader = StreamReader(alert.dump())
    assert reader.read_int(4) == 1234
    assert reader.read_int(4) == int(AlertLevel.WARN)
    assert reader.read_string() == "disk low"
    assert reader.read_string() == "storage"
    assert reader.remaining == 0


def test_dump_size_matches_dump():
    alert = Alert(AlertLevel.ERROR, "failure", source="net", time=5)
    assert alert.dump_size == len(alert.dump())
    assert alert.dump_size == len("failure") + len("net") + 16


def test_alerts_keep_only_latest():
    alerts = Alerts()
    for i in range(300):
        alerts.append(Alert(AlertLevel.INFO, f"alert {i}", time=i))
    assert len(alerts) == Alerts.MAX_SIZE
    messages = [a.message for a in alerts]
    assert messages[0] == "alert 50"
    assert messages[-1] == "alert 299"


def test_alerts_keep_order_below_limit():
    alerts = Alerts()
    alerts.append(Alert(AlertLevel.INFO, "one", time=1))
    alerts.append(Alert(AlertLevel.CRIT, "two", time=2))
    assert [a.message for a in alerts] == ["one", "two"]
    assert len(alerts) == 2