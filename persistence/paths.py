from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_root_from_uri(uri: str) -> Path:
    """
    Resolve a `file://` URI or a bare path to the store directory.

    Relative paths are taken relative to the project root.
    """
    if uri.startswith("file://"):
        parsed = urlparse(uri)
        raw = unquote(parsed.netloc + parsed.path)
    else:
        raw = uri
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = project_root() / path
    return path


def document_path(root: Path, app_id: str) -> Path:
    return root / f"{app_id}.json"
