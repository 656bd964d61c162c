# term_epub/data_processing/decoder.py
"""
용어 레코드 디코더

JSON 값 1개(dict)를 Record로 변환합니다. 선택 필드가 없거나 다른 이름/형태로
와도 실패하지 않으며, 레코드 위치의 값이 JSON 객체가 아닐 때만
RecordDecodeError를 발생시킵니다.

지원하는 형태:
  - definitions*: 문자열 → {"default": 문자열}
                  dict   → {사전명: 문자열 | {"unicode":..,"wylie":..}}
  - relatedTerms: [{"unicode":..,"wylie":..}, ...]
  - *Count: 정수 또는 실수(JSON 숫자)
  - 키 필드가 없으면 상위 맵의 키(fallback_key) 사용
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..errors import RecordDecodeError
from ..records import DefinitionValue, Record, RelatedKey, StringForm, VariantPairForm

Json = Dict[str, Any]

DEFAULT_SOURCE = "default"

KEY_FIELDS = ("searchTerm", "key", "term")
DEFINITION_FIELDS = ("definitions",)
ALT1_FIELDS = ("definitionsUnicode", "definitionsAlt1")
ALT2_FIELDS = ("definitionsWylie", "definitionsAlt2")
RELATED_FIELDS = ("relatedTerms", "relatedKeys")
FORM_A_FIELDS = ("unicode", "formA")
FORM_B_FIELDS = ("wylie", "formB")
DEF_COUNT_FIELDS = ("definitionsCount",)
REL_COUNT_FIELDS = ("relatedTermsCount", "relatedCount")

# 개별 파일이 {"term": {...}} 처럼 한 번 감싸져 있는 경우
WRAPPER_FIELDS = ("term", "entry", "data")

_RECORD_FIELDS = frozenset(
    KEY_FIELDS + DEFINITION_FIELDS + ALT1_FIELDS + ALT2_FIELDS
    + RELATED_FIELDS + DEF_COUNT_FIELDS + REL_COUNT_FIELDS
)


def json_type_name(x: Any) -> str:
    if x is None:
        return "null"
    if isinstance(x, bool):
        return "boolean"
    if isinstance(x, str):
        return "string"
    if isinstance(x, (int, float, Decimal)):
        return "number"
    if isinstance(x, list):
        return "array"
    if isinstance(x, dict):
        return "object"
    return type(x).__name__


def _first(js: Json, names: Sequence[str]) -> Any:
    for name in names:
        if js.get(name) is not None:
            return js[name]
    return None


def coerce_text(x: Any) -> str:
    """스칼라/리스트 값을 표시용 문자열로 변환 (null → "")"""
    if x is None:
        return ""
    if isinstance(x, str):
        return x
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    if isinstance(x, Decimal) and x.is_finite() and x == x.to_integral_value():
        return str(int(x))
    if isinstance(x, list):
        return ", ".join(coerce_text(v) for v in x)
    return str(x)


def coerce_count(x: Any) -> int:
    """정수/실수/숫자 문자열을 int로 (해석 불가하면 0)"""
    if x is None or isinstance(x, bool):
        return 0
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        return int(x) if math.isfinite(x) else 0
    if isinstance(x, Decimal):
        return int(x) if x.is_finite() else 0
    if isinstance(x, str):
        try:
            v = float(x.strip())
        except ValueError:
            return 0
        return int(v) if math.isfinite(v) else 0
    return 0


def classify_definition(value: Any) -> DefinitionValue:
    if isinstance(value, dict):
        return VariantPairForm(
            variant_a=coerce_text(_first(value, FORM_A_FIELDS)),
            variant_b=coerce_text(_first(value, FORM_B_FIELDS)),
        )
    return StringForm(coerce_text(value))


def decode_definitions(raw: Any) -> Dict[str, str]:
    if isinstance(raw, str):
        return {DEFAULT_SOURCE: raw}
    if isinstance(raw, dict):
        return {str(name): classify_definition(v).display() for name, v in raw.items()}
    return {}


def decode_related(raw: Any) -> List[RelatedKey]:
    if not isinstance(raw, list):
        return []
    out = []
    for item in raw:
        # 객체가 아닌 항목은 버리고, 두 표기가 모두 없는 객체는 빈 항목으로 유지
        if isinstance(item, dict):
            out.append(RelatedKey(
                form_a=coerce_text(_first(item, FORM_A_FIELDS)),
                form_b=coerce_text(_first(item, FORM_B_FIELDS)),
            ))
    return out


def unwrap_record(js: Json) -> Json:
    for name in _RECORD_FIELDS:
        if name in js and not (name in WRAPPER_FIELDS and isinstance(js[name], dict)):
            return js
    for name in WRAPPER_FIELDS:
        inner = js.get(name)
        if isinstance(inner, dict):
            return inner
    return js


def decode_record(raw: Any, fallback_key: Optional[str] = None) -> Record:
    if not isinstance(raw, dict):
        raise RecordDecodeError(fallback_key, f"expected JSON object, got {json_type_name(raw)}")

    js = unwrap_record(raw)

    key = _first(js, KEY_FIELDS)
    if not isinstance(key, str) or not key:
        key = fallback_key or ""

    return Record(
        key=key,
        definitions=decode_definitions(_first(js, DEFINITION_FIELDS)),
        definitions_alt1=decode_definitions(_first(js, ALT1_FIELDS)),
        definitions_alt2=decode_definitions(_first(js, ALT2_FIELDS)),
        related_keys=decode_related(_first(js, RELATED_FIELDS)),
        definitions_count=coerce_count(_first(js, DEF_COUNT_FIELDS)),
        related_count=coerce_count(_first(js, REL_COUNT_FIELDS)),
    )
