# term_epub/errors.py
"""
생성 파이프라인 예외 계층

- InputError: 입력 디렉토리/파일 문제 (치명적)
- MalformedAggregateError: 집계(aggregate) JSON 토큰 스트림 손상 (치명적)
- RecordDecodeError: 레코드 위치의 값이 JSON 객체가 아님
  (스트리밍 패스에서는 치명적, 소형 파일 경로에서는 해당 파일만 건너뜀)
- OrderMismatchError: 메타데이터 패스와 챕터 패스의 키 순서 불일치 (치명적)

아카이브 쓰기 실패는 OSError 그대로 전파합니다.
"""

from __future__ import annotations

from typing import Optional


class TermEpubError(Exception):
    """term_epub 예외의 공통 부모"""
    pass


class InputError(TermEpubError):
    """입력 디렉토리를 읽을 수 없거나 유효한 용어 데이터가 없음"""
    pass


class MalformedAggregateError(TermEpubError):
    """집계 문서의 구조가 잘못됨 (`terms`가 객체가 아니거나 토큰 파싱 실패)"""
    pass


class RecordDecodeError(TermEpubError):
    def __init__(self, key: Optional[str], reason: str):
        self.key = key
        self.reason = reason
        where = f"term {key!r}" if key is not None else "term"
        super().__init__(f"decode {where}: {reason}")


class OrderMismatchError(TermEpubError):
    def __init__(self, index: int, expected: str, actual: str):
        self.index = index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"chapter pass order mismatch at stream index {index}: "
            f"expected {expected!r}, got {actual!r}"
        )
