"""Single-file HTML output tests."""

import re

from term_epub.generator import EbookGenerator

from conftest import term, write_aggregate


def _keys(html):
    return re.findall(r'<span class="wylie">\((.*?)\)</span></h2>', html)


def test_html_from_aggregate_is_sorted(tmp_path, make_config):
    d = tmp_path / "data"
    d.mkdir()
    write_aggregate(d / "all.json", [term("c"), term("a"), term("b")])
    out = tmp_path / "book.html"
    result = EbookGenerator(make_config(d, format="html", output=str(out))).generate()
    html = out.read_text(encoding="utf-8")
    assert result.term_count == 3
    assert _keys(html) == ["a", "b", "c"]
    assert html.startswith("<!doctype html>")
    assert html.endswith("</body></html>")
    # 임시 조각 디렉토리는 정리됨
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith("term-epub-")] == []


def test_html_from_term_files(term_files_dir, make_config, tmp_path):
    out = tmp_path / "book.html"
    EbookGenerator(make_config(term_files_dir, format="html", output=str(out))).generate()
    html = out.read_text(encoding="utf-8")
    assert _keys(html) == ["alpha", "mid", "zeta"]
    assert html.count('<hr class="term-sep"/>') == 2


def test_html_embeds_font_as_data_url(aggregate_dir, make_config, tmp_path):
    fonts = tmp_path / "fonts"
    fonts.mkdir()
    (fonts / "DDC_Uchen-webfont.woff").write_bytes(b"wOFF")
    out = tmp_path / "book.html"
    EbookGenerator(
        make_config(aggregate_dir, format="html", output=str(out), font_search_dirs=[str(fonts)])
    ).generate()
    assert "data:font/woff;base64,d09GRg==" in out.read_text(encoding="utf-8")
