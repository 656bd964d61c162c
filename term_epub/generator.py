# term_epub/generator.py
"""
전자책 생성 드라이버

입력 디렉토리 판별:
  - *.json 여러 개 → 병렬 파싱 + 키 정렬 → 메모리 상의 레코드로 챕터 작성
  - *.json 1개     → 집계 문서: pass 1(메타데이터) → 목차/매니페스트 → pass 2(챕터 스트리밍)

오류 정책:
  - 개별 소형 파일 실패, 폰트 누락은 경고 후 계속
  - 토큰 스트림 손상, 순서 불일치, 쓰기 실패는 즉시 중단 (출력 파일은 사용 불가로 간주)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import GeneratorConfig
from .data_processing.aggregate import collect_metadata, stream_chapters
from .data_processing.reader import ParallelTermReader, detect_input
from .epub import ChapterRenderer, EpubWriter
from .html import FragmentSpool, HtmlWriter
from .records import Record, TermIndexEntry
from .render.fonts import FontAsset, find_font, font_search_dirs
from .render.templates import render_chapter
from .utils.progress import human_duration

logger = logging.getLogger("term_epub.generator")


@dataclass
class GenerationResult:
    output_path: Path
    term_count: int
    aggregate: bool
    font_embedded: bool
    skipped_files: int = 0


class ChapterProgress:
    """every 챕터마다 처리 속도/ETA 로그"""

    def __init__(self, total: int, every: int = 100):
        self.total = total
        self.every = max(1, every)
        self.count = 0
        self.start = time.monotonic()

    def tick(self) -> None:
        self.count += 1
        if self.count % self.every == 0:
            elapsed = time.monotonic() - self.start
            rate = self.count / (elapsed + 1e-9)
            eta = (self.total - self.count) / (rate + 1e-9)
            logger.info(
                f"   ✓ Written {self.count:,}/{self.total:,} chapters | {rate:.2f} ch/s | ETA {human_duration(eta)}"
            )

    def done(self) -> None:
        logger.info(f"✓ Written {self.count:,} chapters")


def index_records(records: Sequence[Record]) -> List[TermIndexEntry]:
    """정렬된 레코드 목록 → 챕터 번호가 부여된 인덱스"""
    return [
        TermIndexEntry(
            key=r.key,
            definitions_count=r.definitions_count,
            related_count=r.related_count,
            position=i,
        )
        for i, r in enumerate(records, 1)
    ]


class EbookGenerator:
    def __init__(
        self,
        config: GeneratorConfig,
        renderer: ChapterRenderer = render_chapter,
        build_date: Optional[datetime] = None,
    ):
        self.config = config
        self.renderer = renderer
        self.build_date = build_date
        self.reader = ParallelTermReader(
            workers=config.workers,
            progress_interval=config.progress_interval,
            disable_progress=config.no_progress,
        )

    # ---- input ----
    def read_input(self) -> Tuple[List[Record], Optional[Path]]:
        """(레코드 목록, 집계 파일 경로): 집계 입력이면 레코드 목록은 비어 있음"""
        plan = detect_input(self.config.input_dir)
        if plan.is_aggregate:
            logger.info(f"✓ 집계 JSON 감지 (스트리밍 모드): {plan.aggregate_path}")
            return [], plan.aggregate_path
        logger.info(f"⏳ 용어 파일 {len(plan.term_files):,}개 파싱 중...")
        return self.reader.read(plan.term_files), None

    def locate_font(self) -> Optional[FontAsset]:
        if not self.config.font_enabled:
            return None
        dirs = font_search_dirs(self.config.input_dir, self.config.font_search_dirs)
        return find_font(self.config.font_filename, dirs)

    def build_index(self, records: Sequence[Record], aggregate_path: Optional[Path]) -> List[TermIndexEntry]:
        if aggregate_path is None:
            return index_records(records)
        logger.info("⏳ 집계 파일에서 메타데이터 수집 중 (pass 1)...")
        index = collect_metadata(
            aggregate_path,
            interval=self.config.progress_interval,
            disable_progress=self.config.no_progress,
        )
        logger.info(f"✓ {len(index):,} terms (metadata)")
        if not index:
            logger.warning("⚠️  집계 문서에 용어가 없습니다. 빈 전자책을 생성합니다.")
        return index

    def _write_chapters(self, records, aggregate_path, index, write) -> int:
        progress = ChapterProgress(len(index), self.config.chapter_log_every)

        def on_chapter(position: int, record: Record) -> None:
            write(position, record)
            progress.tick()

        if aggregate_path is not None:
            stream_chapters(
                aggregate_path,
                index,
                on_chapter,
                interval=self.config.progress_interval,
                disable_progress=self.config.no_progress,
            )
        else:
            for entry, record in zip(index, records):
                on_chapter(entry.position, record)
        progress.done()
        return progress.count

    # ---- output ----
    def generate_epub(
        self,
        records: Sequence[Record],
        aggregate_path: Optional[Path],
        font: Optional[FontAsset] = None,
    ) -> int:
        index = self.build_index(records, aggregate_path)
        with EpubWriter(
            self.config.output,
            title=self.config.title,
            author=self.config.author,
            language=self.config.language,
            build_date=self.build_date,
            renderer=self.renderer,
        ) as writer:
            writer.write_navigation(index, font)
            logger.info("⏳ Writing term chapters...")
            count = self._write_chapters(records, aggregate_path, index, writer.write_chapter)
            writer.write_resources(font)
        return count

    def generate_html(
        self,
        records: Sequence[Record],
        aggregate_path: Optional[Path],
        font: Optional[FontAsset] = None,
    ) -> int:
        index = self.build_index(records, aggregate_path)
        output = Path(self.config.output)
        with HtmlWriter(output, self.config.title, font) as writer:
            if aggregate_path is None:
                return self._write_chapters(records, None, index, writer.write_term)
            output.parent.mkdir(parents=True, exist_ok=True)
            with FragmentSpool(dir=output.parent) as spool:
                count = self._write_chapters(records, aggregate_path, index, spool.add)
                spool.drain_into(writer, len(index))
            return count

    def generate(self) -> GenerationResult:
        started = time.monotonic()
        records, aggregate_path = self.read_input()
        font = self.locate_font()

        if self.config.format == "html":
            count = self.generate_html(records, aggregate_path, font)
        else:
            count = self.generate_epub(records, aggregate_path, font)

        result = GenerationResult(
            output_path=Path(self.config.output),
            term_count=count,
            aggregate=aggregate_path is not None,
            font_embedded=font is not None,
            skipped_files=self.reader.skipped,
        )
        logger.info(f"✅ {self.config.format.upper()} created: {result.output_path}")
        logger.info(f"📖 Contains {count:,} terms ({human_duration(time.monotonic() - started)})")
        return result
