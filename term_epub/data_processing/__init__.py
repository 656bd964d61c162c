from .aggregate import collect_metadata, iter_raw_terms, iter_terms, sort_index, stream_chapters
from .decoder import decode_record
from .reader import InputPlan, ParallelTermReader, detect_input, list_json_files

__all__ = [
    "collect_metadata",
    "iter_raw_terms",
    "iter_terms",
    "sort_index",
    "stream_chapters",
    "decode_record",
    "InputPlan",
    "ParallelTermReader",
    "detect_input",
    "list_json_files",
]
