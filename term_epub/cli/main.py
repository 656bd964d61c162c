"""
term-epub 메인 CLI 래퍼

사용 예시:
  term-epub build -i data -o dictionary.epub
  term-epub build -i data --format html -o dictionary.html
  term-epub build -i data workers=8 font.enabled=false
  term-epub sample data/all_terms.json --count 2000
  term-epub config init
  term-epub config show
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from term_epub.cli import config as config_cli
from term_epub.config import GeneratorConfig, load_config
from term_epub.errors import TermEpubError
from term_epub.generator import EbookGenerator
from term_epub.sample import generate_aggregate, generate_term_files
from term_epub.utils.logging import setup_logging

logger = logging.getLogger("term_epub.cli")

app = typer.Typer(
    name="term-epub",
    help="term-epub: 용어 사전 JSON → EPUB/HTML 전자책 생성 CLI",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(config_cli.app, name="config")


@app.command("build")
def build_command(
    overrides: Optional[List[str]] = typer.Argument(
        None, help="설정 오버라이드 (예: workers=8 font.enabled=false)"
    ),
    input_dir: Optional[Path] = typer.Option(
        None, "--input", "-i", help="용어 JSON 디렉토리 (기본: 설정의 input_dir)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="출력 파일 경로"),
    title: Optional[str] = typer.Option(None, "--title", help="책 제목"),
    author: Optional[str] = typer.Option(None, "--author", help="저자"),
    output_format: Optional[str] = typer.Option(None, "--format", help="출력 형식: epub | html"),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="병렬 파싱 워커 수 (0 = CPU 코어 수)"
    ),
    progress_interval_ms: Optional[int] = typer.Option(
        None, "--progress-interval", help="진행률 갱신 간격 (ms)"
    ),
    no_font: bool = typer.Option(False, "--no-font", help="폰트 임베딩 비활성화"),
    no_progress: bool = typer.Option(False, "--no-progress", help="진행 막대 비활성화"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="디버그 로그 출력"),
):
    """
    용어 JSON 디렉토리로부터 전자책 생성

    디렉토리에 *.json 파일이 1개면 집계 문서로 간주하여 2-pass 스트리밍으로 처리하고,
    여러 개면 파일당 용어 1건으로 보고 병렬 파싱합니다.
    """
    setup_logging(verbose)

    extra = {
        "input_dir": str(input_dir) if input_dir else None,
        "output": str(output) if output else None,
        "title": title,
        "author": author,
        "format": output_format,
        "workers": workers,
        "progress_interval_ms": progress_interval_ms,
        "no_progress": True if no_progress else None,
    }
    if no_font:
        extra["font"] = {"enabled": False}

    try:
        cfg = load_config(overrides=overrides, extra=extra)
        gen_config = GeneratorConfig.from_dictconfig(cfg)
    except ValueError as e:
        logger.error(f"❌ 설정 오류: {e}")
        raise typer.Exit(1)

    logger.info(f"📂 입력: {gen_config.input_dir}")
    logger.info(f"📄 출력: {gen_config.output} ({gen_config.format})")

    try:
        result = EbookGenerator(gen_config).generate()
    except (TermEpubError, OSError) as e:
        logger.error(f"❌ 전자책 생성 실패: {e}")
        if Path(gen_config.output).exists():
            logger.error(f"   불완전한 출력 파일이므로 사용하지 마세요: {gen_config.output}")
        raise typer.Exit(1)

    if result.skipped_files:
        logger.warning(f"⚠️  읽지 못한 파일 {result.skipped_files:,}개를 건너뛰었습니다.")
    if gen_config.font_enabled and not result.font_embedded:
        logger.warning("⚠️  폰트 없이 생성되었습니다.")


@app.command("sample")
def sample_command(
    output: Path = typer.Argument(..., help="집계 JSON 경로 (--split이면 출력 디렉토리)"),
    count: int = typer.Option(2000, "--count", "-n", help="생성할 용어 수"),
    split: bool = typer.Option(False, "--split", help="용어 1건당 JSON 파일 1개로 생성"),
):
    """
    테스트용 샘플 입력 생성

    예시:
      term-epub sample data/all_terms.json
      term-epub sample data/terms --split --count 100
    """
    setup_logging()
    if count < 0:
        logger.error("❌ --count는 0 이상이어야 합니다.")
        raise typer.Exit(1)
    try:
        if split:
            generate_term_files(output, count)
        else:
            generate_aggregate(output, count)
    except OSError as e:
        logger.error(f"❌ 샘플 생성 실패: {e}")
        raise typer.Exit(1)


def main():
    app()


if __name__ == "__main__":
    main()
