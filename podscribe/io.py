"""
podscribe.io - Atomic output file writes.

Every artifact the pipeline leaves behind (JSON output, text transcript,
report, diagnostic sidecar) goes through here, so an interrupted run never
leaves a half-written file under the final name.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from pydantic import BaseModel


@contextmanager
def atomic_open(path: Path) -> Iterator[IO[str]]:
    """Open a temp file beside ``path`` and move it into place on success.

    The temp file is removed if the body raises.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            yield tmp
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    tmp_path.replace(path)


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    return data


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Write pretty-printed UTF-8 JSON atomically.

    Args:
        path: Destination path
        data: JSON-serializable data or a pydantic model (dumped by alias)
        indent: Indentation level (default: 2)
    """
    payload = _jsonable(data)
    _write(path, lambda f: json.dump(payload, f, indent=indent, ensure_ascii=False))


def write_text(path: Path, content: str) -> None:
    """Write a UTF-8 text file atomically."""
    _write(path, lambda f: f.write(content))


def _write(path: Path, writer: Callable[[IO[str]], Any]) -> None:
    with atomic_open(path) as f:
        writer(f)
