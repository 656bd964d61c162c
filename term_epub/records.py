# term_epub/records.py
"""
용어 레코드 자료형

- Record: 사전 용어 1건의 정규화된 메모리 표현
- RelatedKey: 관련 용어 참조 (두 가지 문자 표기 형태)
- TermIndexEntry: 메타데이터 패스 결과 (키 + 개수만 보관, 정의 본문은 보관하지 않음)
- StringForm / VariantPairForm: 정의 값의 두 가지 JSON 형태를 디코딩 경계에서 구분
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass(frozen=True)
class StringForm:
    text: str

    def display(self) -> str:
        return self.text


@dataclass(frozen=True)
class VariantPairForm:
    """{"unicode": ..., "wylie": ...} 형태의 정의 값"""
    variant_a: str
    variant_b: str

    def display(self) -> str:
        if self.variant_a and self.variant_b:
            return f"{self.variant_a} ({self.variant_b})"
        return self.variant_a or self.variant_b


DefinitionValue = Union[StringForm, VariantPairForm]


@dataclass(frozen=True)
class RelatedKey:
    form_a: str = ""  # unicode
    form_b: str = ""  # wylie

    @property
    def is_empty(self) -> bool:
        return not self.form_a and not self.form_b


@dataclass
class Record:
    key: str
    definitions: Dict[str, str] = field(default_factory=dict)
    definitions_alt1: Dict[str, str] = field(default_factory=dict)
    definitions_alt2: Dict[str, str] = field(default_factory=dict)
    related_keys: List[RelatedKey] = field(default_factory=list)
    # 참고용 개수 (원본 데이터가 불일치하면 실제 컬렉션 크기와 다를 수 있음)
    definitions_count: int = 0
    related_count: int = 0

    def source_names(self) -> List[str]:
        """세 정의 매핑에 등장하는 사전 이름의 합집합 (정렬됨)"""
        names = set(self.definitions) | set(self.definitions_alt1) | set(self.definitions_alt2)
        return sorted(names)

    @property
    def has_definitions(self) -> bool:
        return bool(self.definitions or self.definitions_alt1 or self.definitions_alt2)

    @property
    def has_related(self) -> bool:
        return bool(self.related_keys)

    def to_index_entry(self, stream_index: int = -1) -> "TermIndexEntry":
        return TermIndexEntry(
            key=self.key,
            definitions_count=self.definitions_count,
            related_count=self.related_count,
            stream_index=stream_index,
        )


@dataclass(frozen=True)
class TermIndexEntry:
    key: str
    definitions_count: int = 0
    related_count: int = 0
    # 집계 문서 내 등장 순서 (0-based), 소형 파일 경로에서는 -1
    stream_index: int = -1
    # 정렬 후 챕터 번호 (1-based), 정렬 전에는 0
    position: int = 0
