# term_epub/epub.py
"""
EPUB(ZIP) 아카이브 작성기

엔트리 순서:
  mimetype (무압축, 첫 엔트리) → META-INF/container.xml → OEBPS/content.opf
  → OEBPS/toc.ncx → OEBPS/title.xhtml → OEBPS/chapter{N}.xhtml ...
  → OEBPS/fonts/* (선택) → OEBPS/style.css

매니페스트/목차는 챕터 본문 없이 TermIndexEntry만으로 먼저 작성하고,
챕터는 호출 측이 write_chapter()로 하나씩 추가합니다 (순서 무관, 번호는 position).
쓰기 실패(OSError)는 그대로 전파합니다.
"""

from __future__ import annotations

import io
import logging
import uuid
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from .records import Record, TermIndexEntry
from .render.fonts import FontAsset
from .render.templates import (
    CONTAINER_XML,
    EPUB_MIMETYPE,
    NCX_FOOT,
    NCX_HREF,
    OPF_FOOT,
    OPF_SPINE_HEAD,
    STYLE_HREF,
    TITLE_HREF,
    chapter_href,
    render_chapter,
    render_ncx_head,
    render_nav_point,
    render_opf_head,
    render_opf_item,
    render_opf_itemref,
    render_stylesheet,
    render_title_page,
)

logger = logging.getLogger("term_epub.epub")

PathLike = Union[str, Path]
ChapterRenderer = Callable[[int, Record], str]

OEBPS = "OEBPS"
MANIFEST_LOG_EVERY = 5000


def book_identifier(title: str) -> str:
    """제목 기반 고정 식별자 (같은 입력이면 같은 값)"""
    return f"term-epub-{uuid.uuid5(uuid.NAMESPACE_URL, title)}"


class EpubWriter:
    """
    사용 예시:
        with EpubWriter("out.epub", title="...", author="...") as w:
            w.write_navigation(index, font)
            for position, record in ...:
                w.write_chapter(position, record)
            w.write_resources(font)
    """

    def __init__(
        self,
        output_path: PathLike,
        title: str,
        author: str,
        language: str = "bo-en",
        build_date: Optional[datetime] = None,
        renderer: ChapterRenderer = render_chapter,
    ):
        self.output_path = Path(output_path)
        self.title = title
        self.author = author
        self.language = language
        self.build_date = build_date or datetime.now()
        self.renderer = renderer
        self.identifier = book_identifier(title)
        self._zip: Optional[zipfile.ZipFile] = None

    # ---- lifecycle ----
    def open(self) -> "EpubWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._zip = zipfile.ZipFile(self.output_path, "w", compression=zipfile.ZIP_DEFLATED)
        self._write_text("mimetype", EPUB_MIMETYPE, compress_type=zipfile.ZIP_STORED)
        self._write_text("META-INF/container.xml", CONTAINER_XML)
        return self

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self) -> "EpubWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---- low level ----
    def _zipinfo(self, name: str, compress_type: int) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=self.build_date.timetuple()[:6])
        info.compress_type = compress_type
        return info

    def _write_text(self, name: str, text: str, compress_type: int = zipfile.ZIP_DEFLATED) -> None:
        self._write_bytes(name, text.encode("utf-8"), compress_type)

    def _write_bytes(self, name: str, data: bytes, compress_type: int = zipfile.ZIP_DEFLATED) -> None:
        if self._zip is None:
            raise RuntimeError("EpubWriter is not open")
        self._zip.writestr(self._zipinfo(name, compress_type), data)

    def _open_stream(self, name: str) -> io.TextIOWrapper:
        if self._zip is None:
            raise RuntimeError("EpubWriter is not open")
        raw = self._zip.open(self._zipinfo(name, zipfile.ZIP_DEFLATED), "w")
        return io.TextIOWrapper(raw, encoding="utf-8", newline="")

    # ---- navigation ----
    def write_package(self, index: Sequence[TermIndexEntry], font: Optional[FontAsset] = None) -> None:
        """content.opf: 매니페스트 + 스파인 (항목 순서 = index 순서)"""
        with self._open_stream(f"{OEBPS}/content.opf") as f:
            f.write(render_opf_head(
                title=self.title,
                author=self.author,
                language=self.language,
                date=self.build_date.strftime("%Y-%m-%d"),
                identifier=self.identifier,
                font_href=font.href if font else None,
                font_media_type=font.media_type if font else None,
            ))
            for i, entry in enumerate(index, 1):
                if i % MANIFEST_LOG_EVERY == 0:
                    logger.debug(f"manifest {i:,}/{len(index):,}")
                f.write(render_opf_item(entry.position or i))
            f.write(OPF_SPINE_HEAD)
            for i, entry in enumerate(index, 1):
                f.write(render_opf_itemref(entry.position or i))
            f.write(OPF_FOOT)

    def write_toc(self, index: Sequence[TermIndexEntry]) -> None:
        """toc.ncx: 챕터마다 키를 레이블로 하는 navPoint"""
        with self._open_stream(f"{OEBPS}/{NCX_HREF}") as f:
            f.write(render_ncx_head(self.title, self.identifier))
            for i, entry in enumerate(index, 1):
                if i % MANIFEST_LOG_EVERY == 0:
                    logger.debug(f"toc {i:,}/{len(index):,}")
                f.write(render_nav_point(entry.position or i, entry.key))
            f.write(NCX_FOOT)

    def write_title_page(self) -> None:
        self._write_text(
            f"{OEBPS}/{TITLE_HREF}",
            render_title_page(self.title, self.author, self.build_date.strftime("%B %d, %Y")),
        )

    def write_navigation(self, index: Sequence[TermIndexEntry], font: Optional[FontAsset] = None) -> None:
        logger.info(f"⏳ 매니페스트/목차 작성 중 ({len(index):,} terms)...")
        self.write_package(index, font)
        self.write_toc(index)
        self.write_title_page()

    # ---- content ----
    def write_chapter(self, position: int, record: Record) -> None:
        self._write_text(f"{OEBPS}/{chapter_href(position)}", self.renderer(position, record))

    def write_font(self, font: FontAsset) -> None:
        self._write_bytes(f"{OEBPS}/{font.href}", font.data)

    def write_stylesheet(self, font: Optional[FontAsset] = None) -> None:
        css = render_stylesheet(font.href, font.family) if font else render_stylesheet()
        self._write_text(f"{OEBPS}/{STYLE_HREF}", css)

    def write_resources(self, font: Optional[FontAsset] = None) -> None:
        if font is not None:
            self.write_font(font)
        self.write_stylesheet(font)
