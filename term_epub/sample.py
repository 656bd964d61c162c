# term_epub/sample.py
"""
테스트용 샘플 입력 생성

- generate_aggregate: {"timestamp", "totalTerms", "terms"} 형태의 집계 문서 1개
- generate_term_files: 용어 1건당 JSON 파일 1개 (소형 파일 경로 확인용)
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from .utils.io import write_json

logger = logging.getLogger("term_epub.sample")

PathLike = Union[str, Path]


def sample_term(key: str) -> Dict[str, Any]:
    return {
        "searchTerm": key,
        "definitionsCount": 1,
        "relatedTermsCount": 2,
        "definitions": {"dict1": f"definition of {key}"},
        "definitionsUnicode": {"dict1": f"unicode {key}"},
        "definitionsWylie": {"dict1": f"wylie {key}"},
        "relatedTerms": [
            {"wylie": f"rt1_{key}", "unicode": f"rtu1_{key}"},
            {"wylie": f"rt2_{key}", "unicode": f"rtu2_{key}"},
        ],
    }


def iter_sample_terms(count: int) -> Iterator[Dict[str, Any]]:
    for i in range(count):
        yield sample_term(f"term_{i:04d}")


def generate_aggregate(
    output: PathLike,
    count: int = 2000,
    timestamp: Optional[str] = None,
) -> Path:
    out = Path(output)
    doc = {
        "timestamp": timestamp or date.today().isoformat(),
        "totalTerms": count,
        "terms": {t["searchTerm"]: t for t in iter_sample_terms(count)},
    }
    write_json(out, doc)
    logger.info(f"✓ 집계 샘플 생성: {out} ({count:,} terms)")
    return out


def generate_term_files(output_dir: PathLike, count: int = 2000) -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    for t in iter_sample_terms(count):
        write_json(out / f"{t['searchTerm']}.json", t)
    logger.info(f"✓ 용어 파일 샘플 생성: {out} ({count:,} files)")
    return out
