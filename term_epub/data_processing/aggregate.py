# term_epub/data_processing/aggregate.py
"""
대용량 집계(aggregate) JSON 스트리밍 처리

집계 문서 형태:
    {"timestamp": "...", "totalTerms": N, "terms": {<key>: <term>, ...}}

문서 전체를 메모리에 올리지 않고 ijson 토큰 스트림으로 `terms` 객체를 찾아
(key, Record) 쌍을 하나씩 내보냅니다. 동일 파일을 두 번 읽습니다.

  1) collect_metadata: 키/개수만 모아 키 순으로 정렬한 인덱스 생성 (목차/매니페스트용)
  2) stream_chapters: 문서 순서대로 레코드를 읽어 정렬 순위(position)와 함께 콜백에 전달

챕터 파일 번호는 문서 순서가 아니라 정렬 순위이므로 목차 k번째 항목은 항상
k번째 키의 챕터를 가리킵니다. 두 패스의 문서 순서 키 시퀀스가 다르면
OrderMismatchError로 중단합니다.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any, BinaryIO, Callable, Iterable, Iterator, List, Optional, Tuple, Union

import ijson
from ijson.common import ObjectBuilder

from ..errors import MalformedAggregateError, OrderMismatchError
from ..records import Record, TermIndexEntry
from ..utils.progress import DEFAULT_PROGRESS_INTERVAL, ByteProgressCounter, byte_ticker
from .decoder import decode_record

logger = logging.getLogger("term_epub.aggregate")

PathLike = Union[str, Path]

TERMS_FIELD = "terms"

_OPEN = ("start_map", "start_array")
_CLOSE = ("end_map", "end_array")
_END = (None, None, None)


# =========================
# 토큰 스트림
# =========================
def _build_value(events: Iterator, event: str, value: Any) -> Any:
    """현재 이벤트에서 시작하는 JSON 값 1개를 조립 (스칼라면 그대로 반환)"""
    if event not in _OPEN:
        return value
    builder = ObjectBuilder()
    builder.event(event, value)
    depth = 1
    for _, event, value in events:
        builder.event(event, value)
        if event in _OPEN:
            depth += 1
        elif event in _CLOSE:
            depth -= 1
            if depth == 0:
                return builder.value
    raise MalformedAggregateError("unexpected end of input inside term value")


def _iter_entries(events: Iterator) -> Iterator[Tuple[str, Any]]:
    for _, event, value in events:
        if event == "end_map":
            return
        key = value
        _, event, value = next(events, _END)
        if event is None:
            break
        yield key, _build_value(events, event, value)
    raise MalformedAggregateError("unexpected end of input inside 'terms'")


def iter_raw_terms(source: BinaryIO) -> Iterator[Tuple[str, Any]]:
    """
    최상위 객체의 `terms` 필드를 찾아 (key, 원시 JSON 값)을 순서대로 내보냅니다.

    - `terms`가 없으면 아무것도 내보내지 않고 종료 (빈 문서, 오류 아님)
    - `terms`가 객체가 아니거나 토큰 파싱에 실패하면 MalformedAggregateError
    - `terms` 객체가 닫히면 나머지 입력은 읽지 않음
    """
    events = ijson.parse(source, use_float=True)
    try:
        depth = 0
        for _, event, value in events:
            if event == "map_key" and depth == 1 and value == TERMS_FIELD:
                _, event, _ = next(events, _END)
                if event != "start_map":
                    raise MalformedAggregateError(
                        f"malformed aggregated JSON: '{TERMS_FIELD}' is not an object (got {event or 'end of input'})"
                    )
                yield from _iter_entries(events)
                return
            if event in _OPEN:
                depth += 1
            elif event in _CLOSE:
                depth -= 1
    except (ijson.JSONError, UnicodeDecodeError) as e:
        raise MalformedAggregateError(f"json token error: {e}") from e


def iter_terms(source: BinaryIO) -> Iterator[Tuple[str, Record]]:
    """iter_raw_terms + 레코드 디코딩 (디코딩 실패는 키 정보와 함께 전파)"""
    for key, raw in iter_raw_terms(source):
        yield key, decode_record(raw, fallback_key=key)


@contextmanager
def open_aggregate(
    path: PathLike,
    desc: str,
    interval: float = DEFAULT_PROGRESS_INTERVAL,
    disable_progress: Optional[bool] = None,
) -> Iterator[ByteProgressCounter]:
    """파일 핸들 + 바이트 카운터 + 진행 표시 스레드를 패스 하나의 범위로 묶음"""
    p = Path(path)
    with open(p, "rb") as f:
        counter = ByteProgressCounter(f, total=p.stat().st_size)
        with byte_ticker(counter, desc, interval=interval, disable=disable_progress):
            yield counter


# =========================
# Pass 1: 메타데이터
# =========================
def sort_index(entries: Iterable[TermIndexEntry]) -> List[TermIndexEntry]:
    """키 순 정렬 (안정 정렬) 후 1부터 시작하는 챕터 번호 부여"""
    ordered = sorted(entries, key=lambda e: e.key)
    return [replace(e, position=i) for i, e in enumerate(ordered, 1)]


def collect_metadata(
    path: PathLike,
    interval: float = DEFAULT_PROGRESS_INTERVAL,
    disable_progress: Optional[bool] = None,
) -> List[TermIndexEntry]:
    entries: List[TermIndexEntry] = []
    with open_aggregate(path, "⏳ 메타데이터 (pass 1)", interval, disable_progress) as counter:
        for i, (_, record) in enumerate(iter_terms(counter)):
            entries.append(record.to_index_entry(stream_index=i))
    logger.debug(f"metadata pass: {len(entries):,} entries")
    return sort_index(entries)


# =========================
# Pass 2: 챕터
# =========================
def stream_chapters(
    path: PathLike,
    index: List[TermIndexEntry],
    on_chapter: Callable[[int, Record], None],
    interval: float = DEFAULT_PROGRESS_INTERVAL,
    disable_progress: Optional[bool] = None,
) -> int:
    """
    문서 순서대로 레코드를 읽어 on_chapter(position, record)를 호출합니다.

    Args:
        index: collect_metadata 결과 (정렬 완료, position 부여됨)
        on_chapter: 챕터 위치(1-based)와 레코드를 받는 콜백

    Returns:
        처리한 레코드 수
    """
    by_stream = sorted(index, key=lambda e: e.stream_index)
    count = 0
    with open_aggregate(path, "⏳ 챕터 쓰기 (pass 2)", interval, disable_progress) as counter:
        for i, (_, record) in enumerate(iter_terms(counter)):
            if i >= len(by_stream):
                raise OrderMismatchError(i, "<end of index>", record.key)
            entry = by_stream[i]
            if entry.key != record.key:
                raise OrderMismatchError(i, entry.key, record.key)
            on_chapter(entry.position, record)
            count += 1
    if count != len(by_stream):
        raise OrderMismatchError(count, by_stream[count].key, "<end of input>")
    return count
