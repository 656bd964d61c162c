# term_epub/utils/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import ujson

PathLike = Union[str, Path]


def read_json(path: PathLike) -> Any:
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        return ujson.load(f)


def write_json(path: PathLike, data: Dict[str, Any], indent: int = 2) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=indent)
