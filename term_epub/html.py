# term_epub/html.py
"""
단일 HTML 문서 출력 (format=html)

모든 용어를 정렬 순서대로 하나의 HTML 파일에 씁니다. 폰트가 있으면
base64 data URL로 @font-face에 포함합니다.

집계 입력은 문서 순서로 읽히므로 FragmentSpool에 순위별 조각 파일로
임시 저장한 뒤 순위 순으로 이어 붙입니다 (메모리에는 레코드 1건만 유지).
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional, TextIO, Union

from .records import Record
from .render.fonts import FontAsset
from .render.templates import escape_xml, headline_form

logger = logging.getLogger("term_epub.html")

PathLike = Union[str, Path]

HTML_STYLE = """
        body{font-family: Georgia, serif; margin: 24px; color:#111}
        h1,h2{color:#222}
        .definition-table{width:100%; border-collapse:collapse; margin-bottom:1.2em}
        .definition-table td{vertical-align:top; padding:6px; border-bottom:1px solid #eee}
        .dictName{font-weight:700; color:#3b3}
        .tib{font-family: 'DDC Uchen', Jomolhari, Arial, sans-serif}
        .wylie{font-family: monospace}

        .term{margin-bottom:2.5em; padding-bottom:1em}
        .term-sep{border:0; border-top:1px solid #ddd; margin:2.5em 0}
    """

TERM_SEPARATOR = '<hr class="term-sep"/>\n'


def render_html_head(title: str, font: Optional[FontAsset] = None) -> str:
    font_face = ""
    if font is not None:
        font_face = (
            f"@font-face {{ font-family: '{font.family}'; "
            f"src: url('{font.data_url()}') format('woff'); }}"
        )
    t = escape_xml(title)
    return (
        '<!doctype html><html lang="en"><head><meta charset="utf-8"><title>'
        f"{t}</title>"
        '<meta name="viewport" content="width=device-width,initial-scale=1"><style>'
        f"{font_face}{HTML_STYLE}</style></head><body><h1>{t}</h1>"
    )


def render_term_fragment(position: int, record: Record) -> str:
    display = headline_form(record) or record.key
    parts = [
        '<div class="term">\n',
        f'<h2 class="tib">{escape_xml(display)} <span class="wylie">({escape_xml(record.key)})</span></h2>\n',
    ]

    rows = []
    for name in record.source_names():
        text = record.definitions.get(name) or record.definitions_alt1.get(name) or record.definitions_alt2.get(name)
        if text:
            rows.append(
                f'<tr><td class="dictName">{escape_xml(name)}</td>'
                f'<td class="definition">{escape_xml(text)}</td></tr>\n'
            )
    if rows:
        parts.append('<table class="definition-table"><tbody>\n')
        parts.extend(rows)
        parts.append("</tbody></table>\n")

    related = [rk for rk in record.related_keys if not rk.is_empty]
    if related:
        parts.append('<div class="related"><strong>Related:</strong><ul>\n')
        for rk in related:
            parts.append(
                f'<li><span class="tib">{escape_xml(rk.form_a)}</span> '
                f'<span class="wylie">({escape_xml(rk.form_b)})</span></li>\n'
            )
        parts.append("</ul></div>\n")

    parts.append(
        f'<div class="meta">Term #{position} | Definitions: {record.definitions_count} '
        f"| Related: {record.related_count}</div>\n"
    )
    parts.append("</div>\n")
    return "".join(parts)


class HtmlWriter:
    def __init__(self, output_path: PathLike, title: str, font: Optional[FontAsset] = None):
        self.output_path = Path(output_path)
        self.title = title
        self.font = font
        self.terms_written = 0
        self._f: Optional[TextIO] = None

    def __enter__(self) -> "HtmlWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._f = open(self.output_path, "w", encoding="utf-8")
        self._f.write(render_html_head(self.title, self.font))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._f is None:
            return
        try:
            if exc_type is None:
                self._f.write("</body></html>")
        finally:
            self._f.close()
            self._f = None

    def write_fragment(self, fragment: str) -> None:
        if self.terms_written:
            self._f.write(TERM_SEPARATOR)
        self._f.write(fragment)
        self.terms_written += 1

    def write_term(self, position: int, record: Record) -> None:
        self.write_fragment(render_term_fragment(position, record))


class FragmentSpool:
    """순위(position)별 HTML 조각을 임시 디렉토리에 저장했다가 순서대로 꺼냄"""

    def __init__(self, dir: Optional[PathLike] = None):
        self._tmp = tempfile.TemporaryDirectory(prefix="term-epub-", dir=dir)
        self.root = Path(self._tmp.name)
        self.count = 0

    def _path(self, position: int) -> Path:
        return self.root / f"{position:09d}.html"

    def add(self, position: int, record: Record) -> None:
        self._path(position).write_text(render_term_fragment(position, record), encoding="utf-8")
        self.count += 1

    def drain_into(self, writer: HtmlWriter, total: int) -> None:
        logger.debug(f"spool {self.count:,}개 조각 병합: {self.root}")
        for position in range(1, total + 1):
            writer.write_fragment(self._path(position).read_text(encoding="utf-8"))

    def cleanup(self) -> None:
        self._tmp.cleanup()

    def __enter__(self) -> "FragmentSpool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
