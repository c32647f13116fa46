from __future__ import annotations

import json
import os
import uuid
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing or empty files. Invalid JSON raises ValueError;
    callers decide whether that is fatal.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def _write_tmp(path: Path, payload: Any, *, indent: int | None, sort_keys: bool) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Unique name so concurrent writers from other processes never share a temp file.
    tmp_path = path.with_suffix(path.suffix + f".{uuid.uuid4().hex}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=indent, sort_keys=sort_keys)
            f.write("\n")
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def atomic_write_json(path: Path, payload: Any, *, indent: int | None = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    tmp_path = _write_tmp(path, payload, indent=indent, sort_keys=sort_keys)
    try:
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def exclusive_create_json(path: Path, payload: Any, *, indent: int | None = 2, sort_keys: bool = True) -> None:
    """
    Write JSON to `path` only if nothing exists there yet.

    The content is written to a temp file first and then hard-linked into
    place, so readers never observe a half-written document. Raises
    FileExistsError if `path` already exists.
    """
    tmp_path = _write_tmp(path, payload, indent=indent, sort_keys=sort_keys)
    try:
        os.link(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
