# term_epub/render/fonts.py
"""
티베트어 웹폰트 탐색

find_font()는 검색 경로를 순서대로 확인해 읽을 수 있는 첫 폰트를 FontAsset으로
반환하고, 없으면 None을 반환합니다. 폰트가 없거나 읽기에 실패해도 예외는
발생시키지 않으며 (경고 로그만 남김), 호출 측은 폰트 없이 계속 진행합니다.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

logger = logging.getLogger("term_epub.fonts")

PathLike = Union[str, Path]

DEFAULT_FONT_FILENAME = "DDC_Uchen-webfont.woff"
DEFAULT_FONT_FAMILY = "DDC Uchen"
WOFF_MEDIA_TYPE = "application/x-font-woff"


@dataclass(frozen=True)
class FontAsset:
    filename: str
    data: bytes
    source: Path
    family: str = DEFAULT_FONT_FAMILY

    @property
    def href(self) -> str:
        """OEBPS 기준 상대 경로"""
        return f"fonts/{self.filename}"

    @property
    def media_type(self) -> str:
        return WOFF_MEDIA_TYPE

    def data_url(self) -> str:
        return "data:font/woff;base64," + base64.b64encode(self.data).decode("ascii")


def font_search_dirs(input_dir: PathLike, extra: Iterable[PathLike] = ()) -> List[Path]:
    """추가 경로 → 입력 디렉토리의 상위 디렉토리 → 현재 작업 디렉토리"""
    dirs = [Path(d) for d in extra]
    dirs.append(Path(input_dir).resolve().parent)
    dirs.append(Path.cwd())
    return dirs


def find_font(filename: str, search_dirs: Sequence[PathLike]) -> Optional[FontAsset]:
    for d in search_dirs:
        candidate = Path(d) / filename
        if not candidate.is_file():
            continue
        try:
            data = candidate.read_bytes()
        except OSError as e:
            logger.warning(f"⚠️  폰트를 읽을 수 없습니다: {candidate} ({e})")
            continue
        logger.info(f"✓ 폰트 발견: {candidate}")
        return FontAsset(filename=filename, data=data, source=candidate)
    logger.warning(f"⚠️  {filename} 폰트를 찾지 못해 폰트 없이 생성합니다 (not critical)")
    return None
