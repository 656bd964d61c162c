# term_epub/data_processing/reader.py
"""
입력 디렉토리 판별 + 소형 용어 파일 병렬 읽기

- *.json 파일이 여러 개: 파일당 용어 1건 → ParallelTermReader로 병렬 디코딩 후 키 순 정렬
- *.json 파일이 1개: 집계 문서로 간주 → aggregate 모듈의 2-pass 스트리밍 사용
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from ..errors import InputError, TermEpubError
from ..records import Record
from ..utils.io import read_json
from ..utils.progress import DEFAULT_PROGRESS_INTERVAL
from .decoder import decode_record

logger = logging.getLogger("term_epub.reader")

PathLike = Union[str, Path]


def default_workers() -> int:
    return os.cpu_count() or 1


def list_json_files(input_dir: PathLike) -> List[Path]:
    p = Path(input_dir)
    if not p.is_dir():
        raise InputError(f"input directory not found: {p}")
    try:
        files = sorted(f for f in p.iterdir() if f.is_file() and f.suffix == ".json")
    except OSError as e:
        raise InputError(f"failed to read directory {p}: {e}") from e
    if not files:
        raise InputError(f"no JSON files found in {p}")
    return files


@dataclass
class InputPlan:
    input_dir: Path
    term_files: List[Path] = field(default_factory=list)
    aggregate_path: Optional[Path] = None

    @property
    def is_aggregate(self) -> bool:
        return self.aggregate_path is not None


def detect_input(input_dir: PathLike) -> InputPlan:
    files = list_json_files(input_dir)
    if len(files) == 1:
        return InputPlan(input_dir=Path(input_dir), aggregate_path=files[0])
    return InputPlan(input_dir=Path(input_dir), term_files=files)


def load_term_file(path: PathLike) -> Record:
    """용어 파일 1개 디코딩 (파싱/디코딩 실패는 예외 전파)"""
    return decode_record(read_json(path))


class ParallelTermReader:
    """
    소형 용어 파일 병렬 리더

    min(파일 수, workers)개의 스레드가 공유 작업 큐에서 파일을 꺼내 디코딩합니다.
    개별 파일 실패는 건너뛰고(skipped로 집계), 수집 후 키 순으로 정렬하여
    워커 완료 순서와 무관한 결정적 순서를 보장합니다.
    """

    def __init__(
        self,
        workers: int = 0,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
        disable_progress: Optional[bool] = None,
    ):
        self.workers = workers if workers > 0 else default_workers()
        self.progress_interval = progress_interval
        self.disable_progress = disable_progress
        self.skipped = 0

    @staticmethod
    def _load_one(path: Path) -> Optional[Record]:
        try:
            record = load_term_file(path)
        except (OSError, ValueError, TermEpubError) as e:
            logger.debug(f"skip {path.name}: {e}")
            return None
        if not record.key:
            logger.debug(f"skip {path.name}: no search term")
            return None
        return record

    def read(self, files: Sequence[PathLike]) -> List[Record]:
        paths = [Path(f) for f in files]
        n = len(paths)
        if n == 0:
            raise InputError("no valid term data found (no input files)")

        num_workers = max(1, min(n, self.workers))
        collected: List[Tuple[Record, str]] = []
        self.skipped = 0

        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            future_to_file = {executor.submit(self._load_one, fp): fp for fp in paths}
            with tqdm(
                total=n,
                desc="⏳ 용어 파일 파싱",
                unit="file",
                mininterval=self.progress_interval,
                disable=self.disable_progress,
            ) as pbar:
                for future in as_completed(future_to_file):
                    pbar.update(1)
                    record = future.result()
                    if record is None:
                        self.skipped += 1
                    else:
                        collected.append((record, str(future_to_file[future])))

        if not collected:
            raise InputError("no valid term data found")

        # 같은 키가 여러 파일에 있으면 파일 경로로 순서 고정
        collected.sort(key=lambda rp: (rp[0].key, rp[1]))
        logger.info(
            f"✓ 용어 파일 {n:,}개 중 {len(collected):,}개 디코딩 완료 "
            f"(건너뜀: {self.skipped:,}개, workers={num_workers})"
        )
        return [r for r, _ in collected]
