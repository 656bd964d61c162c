"""
Pytest fixtures for term-epub tests.
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from term_epub.config import GeneratorConfig

BUILD_DATE = datetime(2024, 1, 2, 3, 4, 5)


def term(key, definition="def", unicode_form=None, related=()):
    t = {
        "searchTerm": key,
        "definitions": {"dict1": f"{definition} {key}"},
        "definitionsCount": 1,
        "relatedTerms": [{"wylie": w, "unicode": u} for w, u in related],
        "relatedTermsCount": len(related),
    }
    if unicode_form is not None:
        t["definitionsUnicode"] = {"dict1": unicode_form}
    return t


def write_aggregate(path: Path, terms, extra=None) -> Path:
    doc = {"timestamp": "2024-01-02", "totalTerms": len(terms)}
    doc.update(extra or {})
    doc["terms"] = {t["searchTerm"]: t for t in terms}
    path.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def aggregate_dir(tmp_path):
    """집계 문서 1개 (문서 순서: b, a)"""
    d = tmp_path / "data"
    d.mkdir()
    write_aggregate(d / "all_terms.json", [term("b"), term("a")])
    return d


@pytest.fixture
def term_files_dir(tmp_path):
    """용어 파일 여러 개 (디렉토리 순서와 키 순서가 다름)"""
    d = tmp_path / "terms"
    d.mkdir()
    for name, key in [("001.json", "zeta"), ("002.json", "alpha"), ("003.json", "mid")]:
        (d / name).write_text(json.dumps(term(key)), encoding="utf-8")
    return d


@pytest.fixture
def make_config(tmp_path):
    def _make(input_dir, **kwargs):
        kwargs.setdefault("output", str(tmp_path / "out" / "book.epub"))
        kwargs.setdefault("no_progress", True)
        kwargs.setdefault("font_search_dirs", [])
        return GeneratorConfig(input_dir=str(input_dir), **kwargs)

    return _make
