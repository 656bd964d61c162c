"""Chapter rendering tests."""

from term_epub.data_processing.decoder import decode_record
from term_epub.render.templates import render_chapter


def test_counts_without_collections_render_no_sections():
    chapter = render_chapter(1, decode_record({"searchTerm": "a", "definitionsCount": 5, "relatedTermsCount": 3}))
    assert "<h2>Definitions</h2>" not in chapter
    assert "Related Terms" not in chapter
    # 개수 필드는 푸터에 그대로 표시
    assert "Term #1 | Definitions: 5 | Related: 3" in chapter


def test_collections_without_counts_render_sections():
    chapter = render_chapter(2, decode_record({
        "searchTerm": "a",
        "definitions": {"d1": "first"},
        "relatedTerms": [{"wylie": "kha", "unicode": "ཁ"}],
        "definitionsCount": 0,
        "relatedTermsCount": 0,
    }))
    assert "<h2>Definitions</h2>" in chapter
    assert "<p>first</p>" in chapter
    assert "<h2>Related Terms</h2>" in chapter
    assert chapter.count("<li>") == 1
    assert "Term #2 | Definitions: 0 | Related: 0" in chapter


def test_empty_related_entries_produce_no_items():
    record = decode_record({
        "searchTerm": "a",
        "relatedTerms": [{}, {"wylie": "", "unicode": ""}, {"wylie": "ga"}],
    })
    assert len(record.related_keys) == 3
    chapter = render_chapter(1, record)
    assert chapter.count("<li>") == 1
    assert '<span class="wylie">ga</span>' in chapter


def test_only_empty_related_entries_render_no_section():
    chapter = render_chapter(1, decode_record({"searchTerm": "a", "relatedTerms": [{}]}))
    assert "Related Terms" not in chapter
    assert "<li>" not in chapter


def test_headline_uses_unicode_definition():
    chapter = render_chapter(1, decode_record({
        "searchTerm": "ka",
        "definitionsUnicode": {"d1": "ཀ"},
    }))
    assert '<span class="unicode">ཀ</span> (<span class="wylie">ka</span>)' in chapter
