"""
term-epub: 용어 사전 JSON → EPUB/HTML 전자책 생성기

사용 예시:
    from term_epub import EbookGenerator, GeneratorConfig

    config = GeneratorConfig(input_dir="data", output="dictionary.epub")
    result = EbookGenerator(config).generate()
    print(result.term_count)

    # 집계 문서 메타데이터만 읽기 (pass 1)
    from term_epub import collect_metadata
    index = collect_metadata("data/all_terms.json")
"""

from .config import GeneratorConfig, load_config
from .data_processing.aggregate import collect_metadata, stream_chapters
from .data_processing.decoder import decode_record
from .data_processing.reader import ParallelTermReader
from .errors import (
    InputError,
    MalformedAggregateError,
    OrderMismatchError,
    RecordDecodeError,
    TermEpubError,
)
from .generator import EbookGenerator, GenerationResult
from .records import Record, TermIndexEntry
from .utils.progress import ByteProgressCounter

__all__ = [
    "EbookGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "load_config",
    "Record",
    "TermIndexEntry",
    "decode_record",
    "collect_metadata",
    "stream_chapters",
    "ParallelTermReader",
    "ByteProgressCounter",
    "TermEpubError",
    "InputError",
    "MalformedAggregateError",
    "OrderMismatchError",
    "RecordDecodeError",
]

__version__ = "0.1.0"
