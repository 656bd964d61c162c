"""Tests for ByteProgressCounter and byte_ticker."""

import io
import threading

import pytest

from term_epub.utils.progress import (
    ByteProgressCounter,
    byte_ticker,
    human_bytes_per_sec,
    human_duration,
)


class FakeClock:
    def __init__(self, t=100.0):
        self.t = t

    def __call__(self):
        return self.t


def test_drain_reaches_total():
    payload = b"x" * 10_000
    counter = ByteProgressCounter(io.BytesIO(payload), total=len(payload))
    while counter.read(333):
        pass
    assert counter.bytes_read() == len(payload)
    assert counter.percent() == pytest.approx(100.0)


def test_values_before_first_read_are_zero():
    counter = ByteProgressCounter(io.BytesIO(b"abc"), total=3)
    assert counter.bytes_read() == 0
    assert counter.percent() == 0.0
    assert counter.throughput() == 0.0
    assert counter.eta_seconds() == 0.0


def test_unknown_total():
    counter = ByteProgressCounter(io.BytesIO(b"abcdef"), total=0)
    counter.read()
    assert counter.bytes_read() == 6
    assert counter.percent() == 0.0
    assert counter.eta_seconds() == 0.0


def test_throughput_and_eta_use_clock():
    clock = FakeClock()
    counter = ByteProgressCounter(io.BytesIO(b"a" * 300), total=300, clock=clock)
    counter.read(100)
    clock.t += 2.0
    assert counter.throughput() == pytest.approx(50.0)
    assert counter.eta_seconds() == pytest.approx(4.0)


def test_source_errors_propagate():
    class Broken:
        def read(self, size=-1):
            raise OSError("disk gone")

    counter = ByteProgressCounter(Broken(), total=10)
    with pytest.raises(OSError):
        counter.read(1)
    assert counter.bytes_read() == 0


def _tickers():
    return [t for t in threading.enumerate() if t.name.startswith("ticker[")]


def test_ticker_thread_stops_on_exit():
    counter = ByteProgressCounter(io.BytesIO(b"z" * 4096), total=4096)
    with byte_ticker(counter, "test", interval=0.01, disable=True):
        while counter.read(512):
            pass
    assert _tickers() == []


def test_ticker_thread_stops_on_error():
    counter = ByteProgressCounter(io.BytesIO(b"z"), total=1)
    with pytest.raises(RuntimeError):
        with byte_ticker(counter, "boom", interval=0.01, disable=True):
            raise RuntimeError("fail inside")
    assert _tickers() == []


def test_human_formats():
    assert human_duration(0) == "0s"
    assert human_duration(5) == "5s"
    assert human_duration(125) == "2m05s"
    assert human_duration(3723) == "1h02m03s"
    assert human_bytes_per_sec(0) == "0 B/s"
    assert human_bytes_per_sec(2048) == "2.00 KB/s"


def test_bar_filled_on_clean_exit_with_unread_tail():
    counter = ByteProgressCounter(io.BytesIO(b"t" * 1000), total=1000)
    with byte_ticker(counter, "tail", interval=0.01, disable=False) as bar:
        counter.read(300)
    assert counter.bytes_read() == 300
    assert bar.n == 1000


def test_bar_not_filled_on_error():
    counter = ByteProgressCounter(io.BytesIO(b"t" * 1000), total=1000)
    with pytest.raises(RuntimeError):
        with byte_ticker(counter, "tail-error", interval=0.01, disable=False) as bar:
            counter.read(300)
            raise RuntimeError("stop")
    assert bar.n == 300
