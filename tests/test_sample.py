"""Tests for the sample input generator."""

import json

from term_epub.data_processing.aggregate import collect_metadata
from term_epub.sample import generate_aggregate, generate_term_files


def test_aggregate_sample(tmp_path):
    path = generate_aggregate(tmp_path / "all.json", count=25, timestamp="2024-01-02")
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["totalTerms"] == 25
    assert doc["timestamp"] == "2024-01-02"
    assert list(doc["terms"])[:2] == ["term_0000", "term_0001"]
    index = collect_metadata(path, disable_progress=True)
    assert len(index) == 25
    assert index[0].related_count == 2


def test_split_sample(tmp_path):
    out = generate_term_files(tmp_path / "terms", count=5)
    assert sorted(p.name for p in out.iterdir()) == [f"term_{i:04d}.json" for i in range(5)]
