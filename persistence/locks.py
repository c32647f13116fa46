from __future__ import annotations

import threading
from pathlib import Path


class DocumentLockRegistry:
    """
    One lock per document file. Writers to different appIds never wait on
    each other; same-appId access within this process is serialised.
    Cross-process safety comes from the atomic file operations, not these locks.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = path.resolve()
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())


DOCUMENT_LOCKS = DocumentLockRegistry()
