# filename: check_twemproxy/store.py
# -*- coding: utf-8 -*-
"""
Snapshot store: one JSON file per monitored host.

The file's mtime is the snapshot timestamp. Files older than ``max_age``
seconds count as absent, so a check that has not run for a while starts over
with a fresh baseline instead of comparing against stale counters.

No locking: two invocations for the same host at the same moment may race on
the file. The last writer wins.
"""
from __future__ import annotations

import hashlib
import json
import re
import time
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .errors import SnapshotFormatError, StoreError
from .models import Snapshot

__all__ = ["SnapshotStore", "FILE_PREFIX", "DEFAULT_MAX_AGE"]

FILE_PREFIX = "twemproxy-"
DEFAULT_MAX_AGE = 300
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def _safe_name(host: str) -> str:
    cleaned = _UNSAFE.sub("_", host)
    if cleaned == host and host not in {".", ".."}:
        return host
    digest = hashlib.sha1(host.encode("utf-8")).hexdigest()[:10]
    return f"{cleaned}-{digest}"


class SnapshotStore:
    def __init__(self, state_dir: Union[str, Path], max_age: int = DEFAULT_MAX_AGE):
        self.state_dir = Path(state_dir)
        self.max_age = max_age

    def path_for(self, host: str) -> Path:
        return self.state_dir / f"{FILE_PREFIX}{_safe_name(host)}"

    def load(self, host: str, now: Optional[float] = None) -> Optional[Snapshot]:
        """Previous snapshot for ``host``, or None when missing or stale."""
        path = self.path_for(host)
        now = time.time() if now is None else now
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            logger.debug("no previous snapshot at {}", path)
            return None
        except OSError as exc:
            raise StoreError(f"cannot stat {path}: {exc}") from exc
        if now - mtime > self.max_age:
            logger.debug("previous snapshot {} is {:.0f}s old, ignoring", path, now - mtime)
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
            return Snapshot.from_payload(payload)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StoreError(f"cannot read previous snapshot {path}: {exc}") from exc
        except SnapshotFormatError as exc:
            raise StoreError(f"corrupt previous snapshot {path}: {exc}") from exc

    def save(self, host: str, snapshot: Snapshot) -> Path:
        path = self.path_for(host)
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(snapshot.to_payload(), f)
        except OSError as exc:
            raise StoreError(f"cannot write snapshot {path}: {exc}") from exc
        logger.debug("saved snapshot for {} to {}", host, path)
        return path
