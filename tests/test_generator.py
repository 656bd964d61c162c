"""End-to-end EPUB generation tests."""

import re
import zipfile

import pytest

from term_epub.errors import InputError, MalformedAggregateError
from term_epub.generator import EbookGenerator

from conftest import BUILD_DATE, term, write_aggregate


def _build(config):
    return EbookGenerator(config, build_date=BUILD_DATE).generate()


def _nav_labels(zf):
    ncx = zf.read("OEBPS/toc.ncx").decode("utf-8")
    labels = re.findall(r"<navLabel><text>(.*?)</text></navLabel>", ncx)
    return labels[1:]  # 첫 항목은 표지


def test_mimetype_is_first_and_stored(aggregate_dir, make_config):
    result = _build(make_config(aggregate_dir))
    with zipfile.ZipFile(result.output_path) as zf:
        first = zf.infolist()[0]
        assert first.filename == "mimetype"
        assert first.compress_type == zipfile.ZIP_STORED
        assert zf.read("mimetype") == b"application/epub+zip"


def test_entry_order(aggregate_dir, make_config):
    result = _build(make_config(aggregate_dir))
    with zipfile.ZipFile(result.output_path) as zf:
        names = zf.namelist()
    assert names[:5] == [
        "mimetype",
        "META-INF/container.xml",
        "OEBPS/content.opf",
        "OEBPS/toc.ncx",
        "OEBPS/title.xhtml",
    ]
    assert names[-1] == "OEBPS/style.css"


def test_aggregate_toc_is_sorted(aggregate_dir, make_config):
    result = _build(make_config(aggregate_dir))
    assert result.aggregate
    assert result.term_count == 2
    with zipfile.ZipFile(result.output_path) as zf:
        assert _nav_labels(zf) == ["a", "b"]
        assert "<title>a</title>" in zf.read("OEBPS/chapter1.xhtml").decode("utf-8")
        assert "<title>b</title>" in zf.read("OEBPS/chapter2.xhtml").decode("utf-8")


def test_chapter_matches_toc_entry(tmp_path, make_config):
    d = tmp_path / "data"
    d.mkdir()
    keys = ["m", "c", "x", "a", "q"]
    write_aggregate(d / "all.json", [term(k) for k in keys])
    result = _build(make_config(d))
    with zipfile.ZipFile(result.output_path) as zf:
        labels = _nav_labels(zf)
        assert labels == sorted(keys)
        for i, key in enumerate(labels, 1):
            chapter = zf.read(f"OEBPS/chapter{i}.xhtml").decode("utf-8")
            assert f"<title>{key}</title>" in chapter
            assert f"Term #{i} |" in chapter


def test_term_files_input(term_files_dir, make_config):
    result = _build(make_config(term_files_dir))
    assert not result.aggregate
    with zipfile.ZipFile(result.output_path) as zf:
        assert _nav_labels(zf) == ["alpha", "mid", "zeta"]


def test_same_input_same_chapters(aggregate_dir, make_config, tmp_path):
    first = _build(make_config(aggregate_dir, output=str(tmp_path / "one.epub")))
    second = _build(make_config(aggregate_dir, output=str(tmp_path / "two.epub")))
    with zipfile.ZipFile(first.output_path) as a, zipfile.ZipFile(second.output_path) as b:
        assert a.namelist() == b.namelist()
        for name in a.namelist():
            assert a.read(name) == b.read(name)


def test_empty_aggregate_builds_empty_book(tmp_path, make_config):
    d = tmp_path / "data"
    d.mkdir()
    write_aggregate(d / "all.json", [])
    result = _build(make_config(d))
    assert result.term_count == 0
    with zipfile.ZipFile(result.output_path) as zf:
        assert _nav_labels(zf) == []
        assert not any(n.startswith("OEBPS/chapter") for n in zf.namelist())


def test_malformed_aggregate(tmp_path, make_config):
    d = tmp_path / "data"
    d.mkdir()
    (d / "all.json").write_text('{"terms": [1, 2]}')
    with pytest.raises(MalformedAggregateError):
        _build(make_config(d))


def test_no_input_files(tmp_path, make_config):
    with pytest.raises(InputError):
        _build(make_config(tmp_path))


def test_font_embedded_when_present(aggregate_dir, make_config, tmp_path):
    fonts = tmp_path / "fonts"
    fonts.mkdir()
    (fonts / "DDC_Uchen-webfont.woff").write_bytes(b"wOFF-fake")
    result = _build(make_config(aggregate_dir, font_search_dirs=[str(fonts)]))
    assert result.font_embedded
    with zipfile.ZipFile(result.output_path) as zf:
        assert zf.read("OEBPS/fonts/DDC_Uchen-webfont.woff") == b"wOFF-fake"
        assert "fonts/DDC_Uchen-webfont.woff" in zf.read("OEBPS/content.opf").decode("utf-8")
        assert "@font-face" in zf.read("OEBPS/style.css").decode("utf-8")


def test_font_missing_is_not_fatal(aggregate_dir, make_config, monkeypatch, tmp_path):
    empty = tmp_path / "cwd"
    empty.mkdir()
    monkeypatch.chdir(empty)
    result = _build(make_config(aggregate_dir, font_filename="missing-font.woff"))
    assert not result.font_embedded
    with zipfile.ZipFile(result.output_path) as zf:
        assert not any(n.startswith("OEBPS/fonts/") for n in zf.namelist())
        assert "@font-face" not in zf.read("OEBPS/style.css").decode("utf-8")


def test_chapter_escapes_markup(tmp_path, make_config):
    d = tmp_path / "data"
    d.mkdir()
    t = term("a<b>")
    t["definitions"] = {"d&1": "x < y & \"z\""}
    write_aggregate(d / "all.json", [t])
    result = _build(make_config(d, font_enabled=False))
    with zipfile.ZipFile(result.output_path) as zf:
        chapter = zf.read("OEBPS/chapter1.xhtml").decode("utf-8")
    assert "<title>a&lt;b&gt;</title>" in chapter
    assert "d&amp;1" in chapter
    assert "x &lt; y &amp; &quot;z&quot;" in chapter
