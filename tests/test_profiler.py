from unittest import mock

import pytest

from xbtkit.profiler import Profiler


def test_slow_block_is_reported():
    with mock.patch("time.perf_counter", side_effect=[2.0, 2.5]):
        with Profiler(100, "query") as profiler:
            pass
    assert profiler.elapsed_ms == 500
    assert profiler.report == "500 ms: query"


def test_fast_block_is_not_reported():
    with mock.patch("time.perf_counter", side_effect=[2.0, 2.0]):
        with Profiler(1, "query") as profiler:
            pass
    assert profiler.elapsed_ms == 0
    assert profiler.report is None


def test_exception_propagates_and_time_recorded():
    with mock.patch("time.perf_counter", side_effect=[1.0, 1.0]):
        with pytest.raises(RuntimeError):
            with Profiler(1000, "boom") as profiler:
                raise RuntimeError("fail")
    assert profiler.elapsed_ms == 0