# term_epub/utils/progress.py
"""
진행률 표시 유틸리티

- ByteProgressCounter: 바이트 소스를 감싸 누적 읽기 바이트를 세고
  퍼센트/처리량/ETA를 계산 (읽기 스레드 1개 + 폴링 스레드 N개에서 안전)
- byte_ticker: 고정 간격으로 카운터를 읽어 tqdm 진행 막대를 갱신하는
  백그라운드 스레드 (with 블록을 벗어나면 반드시 종료)
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import BinaryIO, Callable, Iterator, Optional

from tqdm import tqdm

logger = logging.getLogger("term_epub.progress")

DEFAULT_PROGRESS_INTERVAL = 0.7  # 초

# 처리량/ETA는 tqdm 대신 ByteProgressCounter 값을 postfix로 표시
_BAR_FORMAT = "{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}{postfix}]"


def human_duration(sec: float) -> str:
    if sec <= 0:
        return "0s"
    total = int(sec)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}h{m:02d}m{s:02d}s"
    if m > 0:
        return f"{m}m{s:02d}s"
    return f"{s}s"


def human_bytes_per_sec(bps: float) -> str:
    if bps <= 0:
        return "0 B/s"
    if bps >= 1024 * 1024:
        return f"{bps / 1024.0 / 1024.0:.2f} MB/s"
    if bps >= 1024:
        return f"{bps / 1024.0:.2f} KB/s"
    return f"{bps:.0f} B/s"


class ByteProgressCounter:
    """
    파일 객체 래퍼: read() 호출마다 읽은 바이트 수를 누적합니다.

    카운터 갱신/스냅샷만 락으로 보호하며, 하위 소스의 예외는 그대로 전파합니다.
    total이 0 이하(크기 미상)이면 percent()/eta_seconds()는 0을 반환합니다.
    """

    def __init__(
        self,
        source: BinaryIO,
        total: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self.total = total
        self._clock = clock
        self._read = 0
        self._start: Optional[float] = None
        self._lock = threading.Lock()

    def read(self, size: int = -1) -> bytes:
        chunk = self._source.read(size)
        with self._lock:
            if self._start is None and chunk:
                self._start = self._clock()
            self._read += len(chunk)
        return chunk

    def _snapshot(self):
        with self._lock:
            return self._read, self._start

    def bytes_read(self) -> int:
        return self._snapshot()[0]

    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.bytes_read() / self.total * 100.0

    def throughput(self) -> float:
        """첫 read() 이후 초당 바이트 수 (읽기 전에는 0)"""
        read, start = self._snapshot()
        if start is None:
            return 0.0
        elapsed = self._clock() - start
        if elapsed <= 0:
            return 0.0
        return read / elapsed

    def eta_seconds(self) -> float:
        if self.total <= 0:
            return 0.0
        bps = self.throughput()
        if bps <= 0:
            return 0.0
        remaining = max(self.total - self.bytes_read(), 0)
        return remaining / bps

    def status_line(self) -> str:
        return (
            f"{self.percent():.2f}% | {human_bytes_per_sec(self.throughput())} "
            f"| ETA {human_duration(self.eta_seconds())}"
        )


@contextmanager
def byte_ticker(
    counter: ByteProgressCounter,
    desc: str,
    interval: float = DEFAULT_PROGRESS_INTERVAL,
    disable: Optional[bool] = None,
) -> Iterator[tqdm]:
    """
    interval 초마다 counter를 읽어 진행 막대를 갱신합니다.

    스레드는 with 블록이 정상 종료되든 예외로 빠져나가든 join 됩니다.
    정상 종료 시에는 소스 끝까지 읽지 않았더라도 (예: `terms` 뒤의 내용) 막대를 total로 채웁니다.
    """
    known = counter.total > 0
    bar = tqdm(
        total=counter.total if known else None,
        desc=desc,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        bar_format=_BAR_FORMAT if known else None,
        disable=disable,
    )
    stop = threading.Event()

    def _refresh() -> None:
        done = counter.bytes_read()
        if done > bar.n:
            bar.update(done - bar.n)
        bar.set_postfix_str(counter.status_line(), refresh=True)

    def _run() -> None:
        while not stop.wait(interval):
            _refresh()
            logger.debug(f"{desc}: {counter.status_line()}")

    thread = threading.Thread(target=_run, name=f"ticker[{desc}]", daemon=True)
    thread.start()
    completed = False
    try:
        yield bar
        completed = True
    finally:
        stop.set()
        thread.join()
        _refresh()
        if completed and known and bar.n < counter.total:
            bar.set_postfix_str(f"done | {human_bytes_per_sec(counter.throughput())}", refresh=False)
            bar.update(counter.total - bar.n)
        bar.close()
