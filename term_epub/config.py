# term_epub/config.py
"""
설정 로드

우선순위 (뒤가 앞을 덮어씀):
  1) 패키지 기본값 term_epub/configs/base.yaml
  2) 사용자 ./configs/base.yaml (있으면)
  3) 커맨드라인 dotlist 오버라이드 (예: workers=8 font.enabled=false)

병합된 DictConfig는 GeneratorConfig로 변환되어 생성기 생성자에 전달됩니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from omegaconf import DictConfig, OmegaConf

from .render.fonts import DEFAULT_FONT_FILENAME

logger = logging.getLogger("term_epub.config")

CONFIG_FILENAME = "base.yaml"
OUTPUT_FORMATS = ("epub", "html")


def get_package_configs_dir() -> Path:
    """패키지 내부의 기본 configs 디렉토리 경로"""
    import term_epub.configs

    return Path(term_epub.configs.__file__).parent


def get_user_configs_dir() -> Path:
    """사용자 프로젝트의 configs 디렉토리 경로 (현재 작업 디렉토리 기준)"""
    return Path.cwd() / "configs"


def load_config(
    overrides: Optional[Sequence[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
    user_config: Optional[Path] = None,
) -> DictConfig:
    """
    Args:
        overrides: "key=value" 형식의 오버라이드 목록
        extra: CLI 옵션 등 명시적으로 지정된 값 (None 값은 무시)
        user_config: 사용자 설정 파일 경로 (기본: ./configs/base.yaml)
    """
    cfg = OmegaConf.load(get_package_configs_dir() / CONFIG_FILENAME)

    user_path = user_config or (get_user_configs_dir() / CONFIG_FILENAME)
    if user_path.exists():
        logger.debug(f"사용자 설정 병합: {user_path}")
        cfg = OmegaConf.merge(cfg, OmegaConf.load(user_path))

    if overrides:
        dotlist = OmegaConf.from_dotlist(list(overrides))
        logger.info(f"커맨드라인 오버라이드 적용: {list(dotlist.keys())}")
        cfg = OmegaConf.merge(cfg, dotlist)

    if extra:
        cfg = OmegaConf.merge(cfg, {k: v for k, v in extra.items() if v is not None})

    return cfg


@dataclass
class GeneratorConfig:
    input_dir: str = "data"
    output: str = "tibetan-dictionary.epub"
    title: str = "Tibetan-English Dictionary"
    author: str = "Tibetan Dictionary Project"
    language: str = "bo-en"
    format: str = "epub"
    workers: int = 0
    progress_interval: float = 0.7  # 초
    chapter_log_every: int = 100
    no_progress: Optional[bool] = None
    font_enabled: bool = True
    font_filename: str = DEFAULT_FONT_FILENAME
    font_search_dirs: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(f"format must be one of {OUTPUT_FORMATS}, got {self.format!r}")
        if self.progress_interval <= 0:
            raise ValueError("progress_interval must be > 0")

    @classmethod
    def from_dictconfig(cls, cfg: DictConfig) -> "GeneratorConfig":
        font = cfg.get("font") or {}
        return cls(
            input_dir=str(cfg.input_dir),
            output=str(cfg.output),
            title=str(cfg.title),
            author=str(cfg.author),
            language=str(cfg.get("language", "bo-en")),
            format=str(cfg.get("format", "epub")).lower(),
            workers=int(cfg.get("workers", 0) or 0),
            progress_interval=float(cfg.get("progress_interval_ms", 700)) / 1000.0,
            chapter_log_every=int(cfg.get("chapter_log_every", 100)),
            no_progress=cfg.get("no_progress"),
            font_enabled=bool(font.get("enabled", True)),
            font_filename=str(font.get("filename", DEFAULT_FONT_FILENAME)),
            font_search_dirs=[str(d) for d in (font.get("search_dirs") or [])],
        )
